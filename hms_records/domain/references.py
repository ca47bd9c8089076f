from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class PatientIdRef(BaseModel):
    """A patient referenced by a bare identifier string."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["id"] = "id"
    value: str


class EmbeddedPatientRef(BaseModel):
    """A patient document embedded in the appointment (a populated reference)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["embedded"] = "embedded"
    object_id: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: str = ""
    gender: str = ""
    patient_code: str = ""
    address: str = ""
    profession: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class DoctorIdRef(BaseModel):
    """A doctor referenced by a bare string (an id or a display name)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["id"] = "id"
    value: str


class EmbeddedDoctorRef(BaseModel):
    """A doctor document embedded in the appointment."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["embedded"] = "embedded"
    first_name: str = ""
    last_name: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


PatientRef = Annotated[Union[PatientIdRef, EmbeddedPatientRef], Field(discriminator="kind")]
DoctorRef = Annotated[Union[DoctorIdRef, EmbeddedDoctorRef], Field(discriminator="kind")]
