from enum import Enum

from pydantic import BaseModel, ConfigDict

NOT_SET = "Not set"
NOT_AVAILABLE = "N/A"
UNKNOWN_NAME = "Unknown"
UNASSIGNED_DOCTOR = "Not Assigned"
DEFAULT_SERVICE = "Consultation"


class Gender(str, Enum):
    """Gender values a canonical view can carry."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class CanonicalAppointmentView(BaseModel):
    """An appointment with every field present and display-ready.

    Built by ``normalize_appointment`` from a raw backend record. Consumers
    never need to null-check or type-check a field before rendering it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    patient_name: str = UNKNOWN_NAME
    patient_code: str
    # True when patient_code is the PT-{index} placeholder, not a backend value
    patient_code_synthesized: bool = False
    patient_object_id: str = ""
    phone_number: str = ""
    patient_email: str = ""
    address: str = ""
    profession: str = ""
    gender: Gender = Gender.MALE
    doctor_name: str = UNASSIGNED_DOCTOR
    date: str = NOT_SET
    date_iso: str = ""
    time: str = NOT_SET
    reason_for_visit: str = DEFAULT_SERVICE
    chief_complaint: str = ""
    notes: str = ""
    service: str = DEFAULT_SERVICE
    status: str = "Scheduled"
    appointment_type: str = ""
    mode: str = "In-clinic"
    priority: str = "Normal"
    duration_minutes: int = 20
    location: str = ""
    height_cm: str = ""
    weight_kg: str = ""
    bp: str = ""
    heart_rate: str = ""
    spo2: str = ""
    bmi: str = ""

    @property
    def doctor_initials(self) -> str:
        parts = self.doctor_name.split()
        if not parts or self.doctor_name == UNASSIGNED_DOCTOR:
            return "??"
        if len(parts) == 1:
            return parts[0][:2].upper()
        return (parts[0][0] + parts[-1][0]).upper()

    @property
    def phone_display(self) -> str:
        return self.phone_number or NOT_AVAILABLE

    @property
    def email_display(self) -> str:
        return self.patient_email or NOT_AVAILABLE


class CanonicalPatientView(BaseModel):
    """A patient row for list and search screens."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = UNKNOWN_NAME
    first_name: str = ""
    last_name: str = ""
    patient_code: str = ""
    age: int = 0
    gender: Gender = Gender.OTHER
    phone: str = ""
    email: str = ""
    doctor_name: str = ""
    condition: str = NOT_AVAILABLE
    last_visit: str = ""
    status: str = "Active"
    blood_group: str = "O+"

    @property
    def display_id(self) -> str:
        return self.patient_code or self.id
