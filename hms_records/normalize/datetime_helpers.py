import datetime as dt
from zoneinfo import ZoneInfo

from loguru import logger

from hms_records.domain.models import NOT_SET

_TIME_FORMATS = ("%H:%M", "%H:%M:%S", "%I:%M %p", "%I:%M%p", "%I:%M:%S %p")


def date_to_us_short(date: dt.date) -> str:
    """Convert ``date(2024, 3, 5)`` → ``Mar 5, 2024`` for list and detail screens."""
    return f"{date.strftime('%b')} {date.day}, {date.year}"


def parse_iso_datetime(text: str) -> dt.datetime | None:
    """Parse an ISO 8601 timestamp, accepting a trailing ``Z`` for UTC."""
    text = text.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        return dt.datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_iso_date(text: str) -> dt.date | None:
    """Parse ``2024-03-05`` or the date part of a full ISO timestamp as written."""
    text = text.strip()
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        pass
    parsed = parse_iso_datetime(text)
    return parsed.date() if parsed else None


def format_display_date(text: str) -> str:
    """Format a raw date for display.

    Empty input renders as ``Not set``; text that is not an ISO date is
    shown unchanged.
    """
    if not text:
        return NOT_SET
    date = parse_iso_date(text)
    return date_to_us_short(date) if date else text


def normalize_time(text: str) -> str:
    """Normalize ``14:30:00`` or ``2:30 PM`` to ``14:30``.

    Unrecognized text is returned trimmed; empty input renders as ``Not set``.
    """
    text = text.strip()
    if not text:
        return NOT_SET
    for fmt in _TIME_FORMATS:
        try:
            return dt.datetime.strptime(text.upper(), fmt).strftime("%H:%M")
        except ValueError:
            continue
    return text


def parse_start_at(value: object, tz: dt.tzinfo) -> dt.datetime | None:
    """Parse a combined ``startAt`` value into an aware datetime in ``tz``.

    Accepts ISO 8601 strings and epoch milliseconds. Naive timestamps are
    taken as wall-clock time in ``tz``. Returns ``None`` on any parse failure.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return dt.datetime.fromtimestamp(value / 1000, tz=tz)
        except (OverflowError, OSError, ValueError):
            logger.debug("Ignoring out-of-range startAt epoch value {}", value)
            return None
    if not isinstance(value, str) or not value.strip():
        return None

    parsed = parse_iso_datetime(value)
    if parsed is None:
        logger.debug("Ignoring unparsable startAt value '{}'", value)
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz)
    try:
        return parsed.astimezone(tz)
    except OverflowError:
        logger.debug("Ignoring out-of-range startAt value '{}'", value)
        return None


def resolve_timezone(name: str) -> dt.tzinfo:
    """Resolve a timezone name, falling back to UTC if invalid."""
    if name.upper() == "UTC":
        return dt.timezone.utc
    try:
        return ZoneInfo(name)
    except Exception:
        logger.warning("Invalid display timezone '{}'; defaulting to UTC", name)
        return dt.timezone.utc
