from abc import ABC, abstractmethod
from typing import Any, Protocol

from hms_records.domain.models import CanonicalAppointmentView, CanonicalPatientView


class AbstractRecordsService(ABC):
    """Abstract base class for appointment and patient record operations."""

    @abstractmethod
    async def list_appointments(self) -> list[CanonicalAppointmentView]:
        """Fetch every appointment and normalize it for display.

        Returns:
            Canonical views in backend order. Empty list if there are none.

        Raises:
            HMSUnavailableError: If the backend is unreachable.
        """

    @abstractmethod
    async def get_appointment(self, appointment_id: str) -> CanonicalAppointmentView:
        """Fetch and normalize a single appointment.

        Args:
            appointment_id: The appointment's backend ID.

        Raises:
            AppointmentNotFoundError: If no such appointment exists.
            HMSUnavailableError: If the backend is unreachable.
        """

    @abstractmethod
    async def list_patients(self) -> list[CanonicalPatientView]:
        """Fetch every patient and normalize it for list and search screens.

        Raises:
            HMSUnavailableError: If the backend is unreachable.
        """

    @abstractmethod
    async def update_appointment(
        self, appointment_id: str, view: CanonicalAppointmentView
    ) -> CanonicalAppointmentView:
        """Send the edit-form fields of ``view`` and return the refreshed record.

        Args:
            appointment_id: The appointment's backend ID.
            view: The edited canonical view.

        Raises:
            AppointmentUpdateError: If the backend rejects the update.
            HMSUnavailableError: If the backend is unreachable.
        """

    @abstractmethod
    async def save_intake(
        self,
        appointment_id: str,
        *,
        height_cm: object = None,
        weight_kg: object = None,
        spo2: object = None,
        notes: object = None,
    ) -> CanonicalAppointmentView:
        """Save intake vitals and notes for an appointment.

        Raises:
            AppointmentUpdateError: If the backend rejects the update.
            HMSUnavailableError: If the backend is unreachable.
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is reachable and responding."""

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by this service."""


class HMSClientProtocol(Protocol):
    """Low-level interface to the hospital backend. Returns raw records."""

    async def fetch_appointments(self) -> list[Any]:
        """Fetch all raw appointment records."""
        ...

    async def fetch_appointment_by_id(self, appointment_id: str) -> dict[str, Any]:
        """Fetch one raw appointment record."""
        ...

    async def fetch_patients(self) -> list[Any]:
        """Fetch all raw patient records."""
        ...

    async def update_appointment(
        self, appointment_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """Send a partial update and return the updated raw record."""
        ...

    async def health_check(self) -> bool:
        """Check if the backend is reachable."""
        ...

    async def close(self) -> None:
        """Release resources."""
        ...
