import datetime as dt
from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from hms_records.domain.models import (
    DEFAULT_SERVICE,
    NOT_SET,
    UNASSIGNED_DOCTOR,
    UNKNOWN_NAME,
    CanonicalAppointmentView,
    Gender,
)
from hms_records.domain.references import (
    DoctorRef,
    EmbeddedDoctorRef,
    EmbeddedPatientRef,
    PatientRef,
)
from hms_records.normalize.datetime_helpers import (
    format_display_date,
    normalize_time,
    parse_iso_date,
    parse_start_at,
)
from hms_records.normalize.fields import (
    PHONE_KEYS,
    as_mapping,
    as_text,
    compute_bmi,
    first_positive_int,
    first_text,
    flatten_contact,
    format_bmi,
    parse_gender,
)
from hms_records.normalize.references import parse_doctor_ref, parse_patient_ref

DEFAULT_DURATION_MINUTES = 20


class _PatientIdentity(NamedTuple):
    name: str
    code: str
    code_synthesized: bool
    object_id: str
    gender: str
    phone: str
    email: str
    address: str
    profession: str


def normalize_appointment(
    raw: object,
    index: int,
    *,
    tz: dt.tzinfo = dt.timezone.utc,
) -> CanonicalAppointmentView:
    """Convert one raw backend appointment into a :class:`CanonicalAppointmentView`.

    ``index`` is the record's position in its source list and is used only
    to synthesize a stable fallback id and patient code. ``tz`` is the
    timezone a combined ``startAt`` is displayed in.

    Never raises: every field resolves through a fallback chain that ends
    in a fixed default.
    """
    record = as_mapping(raw)
    metadata = as_mapping(record.get("metadata"))
    vitals = as_mapping(record.get("vitals"))

    patient = _resolve_patient(parse_patient_ref(record.get("patientId")), record, index)
    date_raw, time_raw = _resolve_schedule(record, tz)

    appointment_type = as_text(record.get("appointmentType"))
    visit_reason = _resolve_visit_reason(record, metadata)

    height_cm = _vital(record, vitals, "heightCm")
    weight_kg = _vital(record, vitals, "weightKg")
    bmi = _vital(record, vitals, "bmi") or format_bmi(compute_bmi(height_cm, weight_kg))

    date_parsed = parse_iso_date(date_raw) if date_raw else None

    return CanonicalAppointmentView(
        id=first_text(record.get("_id"), record.get("id")) or str(index),
        patient_name=patient.name or UNKNOWN_NAME,
        patient_code=patient.code,
        patient_code_synthesized=patient.code_synthesized,
        patient_object_id=patient.object_id,
        phone_number=patient.phone,
        patient_email=patient.email,
        address=patient.address,
        profession=patient.profession,
        gender=_resolve_gender(metadata, patient, record),
        doctor_name=_resolve_doctor_name(parse_doctor_ref(record.get("doctorId")), record),
        date=format_display_date(date_raw),
        date_iso=date_parsed.isoformat() if date_parsed else date_raw,
        time=normalize_time(time_raw) if time_raw else NOT_SET,
        reason_for_visit=visit_reason or appointment_type or DEFAULT_SERVICE,
        chief_complaint=first_text(record.get("chiefComplaint"), metadata.get("chiefComplaint")),
        notes=as_text(record.get("notes")),
        service=appointment_type or visit_reason or DEFAULT_SERVICE,
        status=as_text(record.get("status")) or "Scheduled",
        appointment_type=appointment_type,
        mode=first_text(record.get("mode"), metadata.get("mode")) or "In-clinic",
        priority=first_text(record.get("priority"), metadata.get("priority")) or "Normal",
        duration_minutes=first_positive_int(
            record.get("durationMinutes"),
            metadata.get("durationMinutes"),
            default=DEFAULT_DURATION_MINUTES,
        ),
        location=as_text(record.get("location")),
        height_cm=height_cm,
        weight_kg=weight_kg,
        bp=_vital(record, vitals, "bp"),
        heart_rate=_vital(record, vitals, "heartRate"),
        spo2=_vital(record, vitals, "spo2"),
        bmi=bmi,
    )


def normalize_appointments(
    records: Iterable[Any],
    *,
    tz: dt.tzinfo = dt.timezone.utc,
) -> list[CanonicalAppointmentView]:
    """Normalize a fetched list, using each record's position as its index."""
    return [normalize_appointment(raw, index, tz=tz) for index, raw in enumerate(records)]


def _resolve_patient(
    ref: PatientRef | None, record: Mapping[str, Any], index: int
) -> _PatientIdentity:
    client_name = as_text(record.get("clientName"))
    metadata = as_mapping(record.get("metadata"))
    phone = first_text(
        flatten_contact(record.get("phoneNumber"), PHONE_KEYS),
        flatten_contact(metadata.get("phoneNumber"), PHONE_KEYS),
    )
    fallback_code = f"PT-{index}"

    if isinstance(ref, EmbeddedPatientRef):
        code = ref.patient_code or ref.object_id
        return _PatientIdentity(
            name=ref.full_name or client_name,
            code=code or fallback_code,
            code_synthesized=not code,
            object_id=ref.object_id,
            gender=ref.gender,
            phone=ref.phone or phone,
            email=ref.email,
            address=ref.address,
            profession=ref.profession,
        )

    return _PatientIdentity(
        name=client_name,
        code=ref.value if ref is not None else fallback_code,
        code_synthesized=ref is None,
        object_id="",
        gender="",
        phone=phone,
        email="",
        address="",
        profession="",
    )


def _resolve_gender(
    metadata: Mapping[str, Any], patient: _PatientIdentity, record: Mapping[str, Any]
) -> Gender:
    # Appointment metadata holds the gender captured at triage; it outranks
    # whatever the patient record says.
    for candidate in (metadata.get("gender"), patient.gender, record.get("gender")):
        gender = parse_gender(candidate)
        if gender is not None:
            return gender
    return Gender.MALE


def _resolve_doctor_name(ref: DoctorRef | None, record: Mapping[str, Any]) -> str:
    if isinstance(ref, EmbeddedDoctorRef):
        name = ref.full_name
    elif ref is not None:
        name = ref.value
    else:
        name = ""
    return name or as_text(record.get("doctor")) or UNASSIGNED_DOCTOR


def _resolve_schedule(record: Mapping[str, Any], tz: dt.tzinfo) -> tuple[str, str]:
    """Return raw ``(date, time)`` text, deriving both from ``startAt`` when ``date`` is absent."""
    date = as_text(record.get("date"))
    time = as_text(record.get("time"))
    if date:
        return date, time

    start_at = parse_start_at(record.get("startAt"), tz)
    if start_at is None:
        return date, time
    return start_at.date().isoformat(), start_at.strftime("%H:%M")


def _resolve_visit_reason(record: Mapping[str, Any], metadata: Mapping[str, Any]) -> str:
    return first_text(
        record.get("chiefComplaint"),
        record.get("reason"),
        metadata.get("chiefComplaint"),
        metadata.get("reason"),
        record.get("notes"),
    )


def _vital(record: Mapping[str, Any], vitals: Mapping[str, Any], key: str) -> str:
    return first_text(record.get(key), vitals.get(key))
