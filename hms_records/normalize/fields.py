"""Coercion helpers for loosely-typed backend values.

Every helper here accepts anything and returns a value of one fixed type.
Values of the wrong shape are treated as absent, never as an error.
"""

import math
from collections.abc import Mapping
from typing import Any

from hms_records.domain.models import Gender

_EMPTY: Mapping[str, Any] = {}

PHONE_KEYS = ("phone", "number")
EMAIL_KEYS = ("email", "address")
ADDRESS_KEYS = ("line1", "houseNo", "street", "city", "state", "pincode", "country")


def as_mapping(value: object) -> Mapping[str, Any]:
    """Return ``value`` if it is a mapping, else an empty one."""
    return value if isinstance(value, Mapping) else _EMPTY


def as_text(value: object) -> str:
    """Render a scalar as trimmed display text.

    ``70.0`` renders as ``"70"``. Booleans, mappings, sequences and
    non-finite floats carry no displayable text and render as ``""``.
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # past the interpreter's int-to-str digit limit
            return ""
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        return str(int(value)) if value.is_integer() else str(value)
    return ""


def first_text(*values: object) -> str:
    """Return the first candidate that renders as non-empty text."""
    for value in values:
        text = as_text(value)
        if text:
            return text
    return ""


def flatten_contact(value: object, keys: tuple[str, ...]) -> str:
    """Flatten a contact field that may be a scalar or a nested object.

    For objects, ``keys`` are probed in order, e.g. ``{"number": "555"}``
    with ``PHONE_KEYS`` gives ``"555"``.
    """
    if isinstance(value, Mapping):
        return first_text(*(value.get(key) for key in keys))
    return as_text(value)


def flatten_address(value: object) -> str:
    """Join the parts of a structured address, or return a plain one as-is."""
    if isinstance(value, Mapping):
        parts = (as_text(value.get(key)) for key in ADDRESS_KEYS)
        return ", ".join(part for part in parts if part)
    return as_text(value)


def as_number(value: object) -> float | None:
    """Parse a number or numeric string; ``None`` when not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (ValueError, OverflowError):
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def as_positive_int(value: object) -> int | None:
    """Truncate a number or numeric string to a positive int, else ``None``."""
    number = as_number(value)
    if number is None or number <= 0:
        return None
    return int(number)


def first_positive_int(*values: object, default: int) -> int:
    for value in values:
        number = as_positive_int(value)
        if number is not None:
            return number
    return default


def parse_gender(value: object) -> Gender | None:
    """Fold free-text gender onto :class:`Gender`.

    ``"female"``, ``"F"`` → Female; ``"male"``, ``"M"`` → Male; any other
    non-empty text → Other; empty → ``None``.
    """
    text = as_text(value).lower()
    if not text:
        return None
    if text.startswith("f"):
        return Gender.FEMALE
    if text.startswith("m"):
        return Gender.MALE
    return Gender.OTHER


def compute_bmi(height_cm: object, weight_kg: object) -> float | None:
    """``weight / (height/100)^2`` rounded to one decimal.

    Only computed when both values are present and positive, and only
    returned when the result is a finite positive number.
    """
    height = as_number(height_cm)
    weight = as_number(weight_kg)
    if height is None or weight is None or height <= 0 or weight <= 0:
        return None
    meters = height / 100
    try:
        bmi = weight / (meters * meters)
    except ZeroDivisionError:
        return None
    if not math.isfinite(bmi) or bmi <= 0:
        return None
    return round(bmi, 1)


def format_bmi(bmi: float | None) -> str:
    return "" if bmi is None else f"{bmi:.1f}"
