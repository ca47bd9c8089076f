from typing import Any

from hms_records.domain.models import NOT_SET, UNKNOWN_NAME, CanonicalAppointmentView
from hms_records.normalize.fields import as_text, compute_bmi

# Keys the edit form owns, mapped from canonical view attributes.
EDITABLE_FIELDS: dict[str, str] = {
    "appointmentType": "appointment_type",
    "mode": "mode",
    "priority": "priority",
    "status": "status",
    "location": "location",
    "chiefComplaint": "chief_complaint",
    "notes": "notes",
    "heightCm": "height_cm",
    "weightKg": "weight_kg",
    "bp": "bp",
    "heartRate": "heart_rate",
    "spo2": "spo2",
}


def build_update_payload(view: CanonicalAppointmentView) -> dict[str, Any]:
    """Build the sparse raw update body for an edited appointment.

    Only keys the edit form owns are emitted, and placeholder display
    values (``Unknown``, ``Not set``, empty strings, a synthesized patient
    code) are left out so they never overwrite real backend data. Gender
    goes under ``metadata``.
    """
    payload: dict[str, Any] = {}

    if view.patient_name != UNKNOWN_NAME:
        payload["clientName"] = view.patient_name
    if not view.patient_code_synthesized:
        payload["patientId"] = view.patient_code
    if view.phone_number:
        payload["phoneNumber"] = view.phone_number
    payload["metadata"] = {"gender": view.gender.value}
    if view.date_iso:
        payload["date"] = view.date_iso
    if view.time != NOT_SET:
        payload["time"] = view.time
    payload["durationMinutes"] = view.duration_minutes

    for key, attribute in EDITABLE_FIELDS.items():
        value = getattr(view, attribute)
        if value:
            payload[key] = value

    return payload


def build_intake_payload(
    height_cm: object = None,
    weight_kg: object = None,
    spo2: object = None,
    notes: object = None,
) -> dict[str, Any]:
    """Build the intake-form update body.

    Empty values are sent as ``None`` so the backend clears them; BMI is
    derived from height and weight when both are positive.
    """
    bmi = compute_bmi(height_cm, weight_kg)
    return {
        "heightCm": as_text(height_cm) or None,
        "weightKg": as_text(weight_kg) or None,
        "bmi": f"{bmi:.1f}" if bmi is not None else None,
        "spo2": as_text(spo2) or None,
        "notes": as_text(notes) or None,
    }
