import pytest

from hms_records.api.adapters.fake import FakeHMSClient
from hms_records.api.service import RecordsService


@pytest.fixture
def fake_client() -> FakeHMSClient:
    return FakeHMSClient()


@pytest.fixture
def service(fake_client: FakeHMSClient) -> RecordsService:
    return RecordsService(client=fake_client)
