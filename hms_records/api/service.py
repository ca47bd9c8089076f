import datetime as dt

from loguru import logger

from hms_records.api.ports import AbstractRecordsService, HMSClientProtocol
from hms_records.domain.exceptions import (
    AppointmentNotFoundError,
    AppointmentUpdateError,
    HMSUnavailableError,
)
from hms_records.domain.models import CanonicalAppointmentView, CanonicalPatientView
from hms_records.normalize.appointments import normalize_appointment, normalize_appointments
from hms_records.normalize.patients import normalize_patients
from hms_records.normalize.payload import build_intake_payload, build_update_payload


class RecordsService(AbstractRecordsService):
    """Records service that delegates to an HMSClientProtocol and normalizes results."""

    def __init__(self, client: HMSClientProtocol, *, tz: dt.tzinfo = dt.timezone.utc) -> None:
        self._client = client
        self._tz = tz

    async def list_appointments(self) -> list[CanonicalAppointmentView]:
        logger.info("Fetching appointments")

        try:
            records = await self._client.fetch_appointments()
        except HMSUnavailableError:
            raise
        except Exception as exc:
            raise HMSUnavailableError(f"Appointment fetch failed: {exc}") from exc

        views = normalize_appointments(records, tz=self._tz)
        logger.info("Normalized {} appointment(s)", len(views))
        return views

    async def get_appointment(self, appointment_id: str) -> CanonicalAppointmentView:
        logger.info("Fetching appointment: id={}", appointment_id)

        try:
            record = await self._client.fetch_appointment_by_id(appointment_id)
        except (AppointmentNotFoundError, HMSUnavailableError):
            raise
        except Exception as exc:
            raise HMSUnavailableError(f"Appointment fetch failed: {exc}") from exc

        return normalize_appointment(record, 0, tz=self._tz)

    async def list_patients(self) -> list[CanonicalPatientView]:
        logger.info("Fetching patients")

        try:
            records = await self._client.fetch_patients()
        except HMSUnavailableError:
            raise
        except Exception as exc:
            raise HMSUnavailableError(f"Patient fetch failed: {exc}") from exc

        views = normalize_patients(records)
        logger.info("Normalized {} patient(s)", len(views))
        return views

    async def update_appointment(
        self, appointment_id: str, view: CanonicalAppointmentView
    ) -> CanonicalAppointmentView:
        payload = build_update_payload(view)
        logger.info("Updating appointment: id={}, fields={}", appointment_id, sorted(payload))
        return await self._send_update(appointment_id, payload)

    async def save_intake(
        self,
        appointment_id: str,
        *,
        height_cm: object = None,
        weight_kg: object = None,
        spo2: object = None,
        notes: object = None,
    ) -> CanonicalAppointmentView:
        payload = build_intake_payload(height_cm, weight_kg, spo2, notes)
        logger.info("Saving intake: id={}, bmi={}", appointment_id, payload["bmi"])
        return await self._send_update(appointment_id, payload)

    async def health_check(self) -> bool:
        return await self._client.health_check()

    async def close(self) -> None:
        await self._client.close()

    async def _send_update(
        self, appointment_id: str, payload: dict[str, object]
    ) -> CanonicalAppointmentView:
        try:
            await self._client.update_appointment(appointment_id, payload)
        except (AppointmentUpdateError, AppointmentNotFoundError, HMSUnavailableError):
            raise
        except Exception as exc:
            raise AppointmentUpdateError(reason=str(exc), appointment_id=appointment_id) from exc

        # The view is never patched locally; it is re-derived from backend state.
        return await self.get_appointment(appointment_id)
