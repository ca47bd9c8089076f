from typing import Any

from hms_records.domain.exceptions import AppointmentNotFoundError


class FakeHMSClient:
    """In-memory test double for the HMSClientProtocol protocol.

    Pre-load ``appointments`` and ``patients`` with raw records to control
    what the client returns. Set ``fetch_error``, ``update_error``, etc. to
    make the corresponding method raise on the next call.

    After calls, inspect ``updates`` to verify the payloads that were sent.
    Updates are merged shallowly into the stored record, like the backend's
    ``PUT`` does.
    """

    def __init__(self) -> None:
        self.appointments: list[Any] = []
        self.patients: list[Any] = []
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self.closed: bool = False

        self.fetch_error: Exception | None = None
        self.patients_error: Exception | None = None
        self.update_error: Exception | None = None

    async def fetch_appointments(self) -> list[Any]:
        if self.fetch_error:
            raise self.fetch_error
        return list(self.appointments)

    async def fetch_appointment_by_id(self, appointment_id: str) -> dict[str, Any]:
        if self.fetch_error:
            raise self.fetch_error
        return self._find(appointment_id)

    async def fetch_patients(self) -> list[Any]:
        if self.patients_error:
            raise self.patients_error
        return list(self.patients)

    async def update_appointment(
        self, appointment_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        if self.update_error:
            raise self.update_error
        record = self._find(appointment_id)
        self.updates.append((appointment_id, payload))
        record.update(payload)
        return record

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True

    def _find(self, appointment_id: str) -> dict[str, Any]:
        for record in self.appointments:
            if isinstance(record, dict) and str(record.get("_id")) == appointment_id:
                return record
        raise AppointmentNotFoundError(appointment_id)
