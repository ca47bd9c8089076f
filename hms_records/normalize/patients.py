import datetime as dt
from collections.abc import Iterable, Mapping
from typing import Any

from hms_records.domain.models import NOT_AVAILABLE, UNKNOWN_NAME, CanonicalPatientView, Gender
from hms_records.normalize.datetime_helpers import parse_iso_date
from hms_records.normalize.fields import (
    EMAIL_KEYS,
    PHONE_KEYS,
    as_mapping,
    as_positive_int,
    as_text,
    first_text,
    flatten_contact,
    parse_gender,
)

CONDITION_NOTES_LIMIT = 30


def normalize_patient(
    raw: object,
    index: int,
    *,
    today: dt.date | None = None,
) -> CanonicalPatientView:
    """Convert one raw patient record into a :class:`CanonicalPatientView`.

    ``today`` anchors age derivation from ``dateOfBirth`` and defaults to
    the current date. Never raises.
    """
    record = as_mapping(raw)
    metadata = as_mapping(record.get("metadata"))

    first_name = as_text(record.get("firstName"))
    last_name = as_text(record.get("lastName"))
    record_id = first_text(record.get("_id"), record.get("id"), record.get("patientId"))

    return CanonicalPatientView(
        id=record_id or str(index),
        name=as_text(record.get("name")) or f"{first_name} {last_name}".strip() or UNKNOWN_NAME,
        first_name=first_name,
        last_name=last_name,
        patient_code=first_text(
            record.get("patientCode"),
            record.get("patient_code"),
            metadata.get("patientCode"),
            metadata.get("patient_code"),
        )
        or record_id,
        age=_resolve_age(record, metadata, today or dt.date.today()),
        gender=parse_gender(record.get("gender")) or Gender.OTHER,
        phone=flatten_contact(record.get("phone"), PHONE_KEYS),
        email=flatten_contact(record.get("email"), EMAIL_KEYS),
        doctor_name=_resolve_doctor_name(record),
        condition=_resolve_condition(record, metadata),
        last_visit=first_text(
            record.get("lastVisit"), record.get("lastVisitDate"), record.get("updatedAt")
        ),
        status=as_text(record.get("status")) or "Active",
        blood_group=first_text(record.get("bloodGroup"), metadata.get("bloodGroup")) or "O+",
    )


def normalize_patients(
    records: Iterable[Any], *, today: dt.date | None = None
) -> list[CanonicalPatientView]:
    return [normalize_patient(raw, index, today=today) for index, raw in enumerate(records)]


def _resolve_age(record: Mapping[str, Any], metadata: Mapping[str, Any], today: dt.date) -> int:
    for candidate in (record.get("age"), metadata.get("age")):
        age = as_positive_int(candidate)
        if age is not None:
            return age

    dob_text = as_text(record.get("dateOfBirth"))
    dob = parse_iso_date(dob_text) if dob_text else None
    if dob is None or dob > today:
        return 0
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def _resolve_doctor_name(record: Mapping[str, Any]) -> str:
    doctor = record.get("doctor")
    if isinstance(doctor, Mapping):
        name = first_text(doctor.get("name"), doctor.get("fullName"))
    else:
        name = as_text(doctor)
    return first_text(
        name,
        record.get("assignedDoctor"),
        record.get("doctorName"),
        record.get("doctorId"),
    )


def _summarize_history(history: object) -> str:
    if not isinstance(history, list):
        return ""
    items = [text for text in (as_text(item) for item in history) if text]
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return f"{items[0]} +{len(items) - 1}"


def _resolve_condition(record: Mapping[str, Any], metadata: Mapping[str, Any]) -> str:
    condition = first_text(
        record.get("condition"),
        _summarize_history(record.get("medicalHistory")),
        _summarize_history(metadata.get("medicalHistory")),
        metadata.get("condition"),
    )
    if condition:
        return condition

    notes = as_text(record.get("notes"))
    if len(notes) > CONDITION_NOTES_LIMIT:
        return f"{notes[:CONDITION_NOTES_LIMIT]}..."
    return notes or NOT_AVAILABLE
