class HMSError(Exception):
    """Base exception for all hospital-backend errors."""


class HMSUnavailableError(HMSError):
    """Raised when the backend is unreachable or returns an unusable response."""


class AppointmentNotFoundError(HMSError):
    """Raised when a single appointment fetch finds no record."""

    def __init__(self, appointment_id: str) -> None:
        self.appointment_id = appointment_id
        super().__init__(f"Appointment not found: {appointment_id}")


class AppointmentUpdateError(HMSError):
    """Raised when an appointment update is rejected."""

    def __init__(self, reason: str, appointment_id: str | None = None) -> None:
        self.reason = reason
        self.appointment_id = appointment_id
        super().__init__(f"Failed to update appointment: {reason}")
