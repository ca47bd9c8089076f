from collections.abc import Mapping

from hms_records.domain.references import (
    DoctorIdRef,
    DoctorRef,
    EmbeddedDoctorRef,
    EmbeddedPatientRef,
    PatientIdRef,
    PatientRef,
)
from hms_records.normalize.fields import (
    EMAIL_KEYS,
    PHONE_KEYS,
    as_mapping,
    as_text,
    first_text,
    flatten_address,
    flatten_contact,
)


def parse_patient_ref(value: object) -> PatientRef | None:
    """Classify a raw ``patientId`` as an id reference or an embedded patient.

    Returns ``None`` when the value carries neither.
    """
    if isinstance(value, Mapping):
        metadata = as_mapping(value.get("metadata"))
        return EmbeddedPatientRef(
            object_id=first_text(value.get("_id"), value.get("id")),
            first_name=as_text(value.get("firstName")),
            last_name=as_text(value.get("lastName")),
            phone=(
                flatten_contact(value.get("phone"), PHONE_KEYS)
                or flatten_contact(value.get("phoneNumber"), PHONE_KEYS)
            ),
            email=flatten_contact(value.get("email"), EMAIL_KEYS),
            gender=first_text(value.get("gender"), metadata.get("gender")),
            patient_code=as_text(metadata.get("patientCode")),
            address=flatten_address(value.get("address")),
            profession=first_text(value.get("profession"), value.get("occupation")),
        )

    identifier = as_text(value)
    return PatientIdRef(value=identifier) if identifier else None


def parse_doctor_ref(value: object) -> DoctorRef | None:
    """Classify a raw ``doctorId`` as a bare string or an embedded doctor."""
    if isinstance(value, Mapping):
        return EmbeddedDoctorRef(
            first_name=as_text(value.get("firstName")),
            last_name=as_text(value.get("lastName")),
        )

    text = as_text(value)
    return DoctorIdRef(value=text) if text else None
