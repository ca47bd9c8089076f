from loguru import logger

from hms_records.api.adapters.rest import RestHMSClient
from hms_records.api.service import RecordsService
from hms_records.config import AppConfig
from hms_records.normalize.datetime_helpers import resolve_timezone


def build_records_service(config: AppConfig) -> RecordsService:
    """Build the records service from config."""
    logger.info(
        "Building records service: base_url={}, display_timezone={}",
        config.api.base_url,
        config.display_timezone,
    )
    client = RestHMSClient(
        base_url=config.api.base_url,
        token=config.api.token,
        timeout=config.api.timeout,
    )
    return RecordsService(client, tz=resolve_timezone(config.display_timezone))
