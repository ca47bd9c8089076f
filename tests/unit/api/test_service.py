from typing import Any

import pytest

from hms_records.api.adapters.fake import FakeHMSClient
from hms_records.api.service import RecordsService
from hms_records.domain.exceptions import (
    AppointmentNotFoundError,
    AppointmentUpdateError,
    HMSUnavailableError,
)
from hms_records.domain.models import Gender

# Fixtures (fake_client, service) provided by tests/conftest.py


def _appointment(**overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "_id": "apt-1",
        "patientId": {
            "_id": "665f",
            "firstName": "Jane",
            "lastName": "Doe",
            "metadata": {"patientCode": "PT-99"},
        },
        "doctorId": {"firstName": "Ana", "lastName": "Ruiz"},
        "metadata": {"gender": "Female"},
        "date": "2024-03-05",
        "time": "14:30",
        "status": "Scheduled",
    }
    record.update(overrides)
    return record


class TestListAppointments:
    @pytest.mark.asyncio
    async def test_normalizes_every_record(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        fake_client.appointments = [_appointment(), {"patientId": "xyz", "clientName": "John"}]

        views = await service.list_appointments()

        assert len(views) == 2
        assert views[0].patient_name == "Jane Doe"
        assert views[0].doctor_name == "Ana Ruiz"
        assert views[0].gender == Gender.FEMALE
        assert views[1].id == "1"
        assert views[1].patient_code == "xyz"

    @pytest.mark.asyncio
    async def test_returns_empty_when_no_records(self, service: RecordsService) -> None:
        assert await service.list_appointments() == []

    @pytest.mark.asyncio
    async def test_wraps_unexpected_error_as_unavailable(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        fake_client.fetch_error = RuntimeError("connection reset")

        with pytest.raises(HMSUnavailableError, match="Appointment fetch failed"):
            await service.list_appointments()

    @pytest.mark.asyncio
    async def test_propagates_unavailable_directly(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        fake_client.fetch_error = HMSUnavailableError("service down")

        with pytest.raises(HMSUnavailableError, match="service down"):
            await service.list_appointments()


class TestGetAppointment:
    @pytest.mark.asyncio
    async def test_normalizes_single_record(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        fake_client.appointments = [_appointment()]

        view = await service.get_appointment("apt-1")

        assert view.id == "apt-1"
        assert view.patient_code == "PT-99"
        assert view.date == "Mar 5, 2024"

    @pytest.mark.asyncio
    async def test_not_found_propagates(self, service: RecordsService) -> None:
        with pytest.raises(AppointmentNotFoundError, match="missing"):
            await service.get_appointment("missing")


class TestListPatients:
    @pytest.mark.asyncio
    async def test_normalizes_patients(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        fake_client.patients = [{"_id": "p1", "firstName": "Jane", "lastName": "Doe", "age": "41"}]

        views = await service.list_patients()

        assert views[0].name == "Jane Doe"
        assert views[0].age == 41

    @pytest.mark.asyncio
    async def test_wraps_unexpected_error(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        fake_client.patients_error = ValueError("bad json")

        with pytest.raises(HMSUnavailableError, match="Patient fetch failed"):
            await service.list_patients()


class TestUpdateAppointment:
    @pytest.mark.asyncio
    async def test_sends_sparse_payload_and_refreshes(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        fake_client.appointments = [_appointment()]
        view = await service.get_appointment("apt-1")
        edited = view.model_copy(update={"gender": Gender.OTHER, "location": "Room 9"})

        refreshed = await service.update_appointment("apt-1", edited)

        appointment_id, payload = fake_client.updates[0]
        assert appointment_id == "apt-1"
        assert payload["metadata"] == {"gender": "Other"}
        assert payload["location"] == "Room 9"
        assert "doctorId" not in payload
        assert refreshed.gender == Gender.OTHER
        assert refreshed.location == "Room 9"
        assert refreshed.patient_code == "PT-99"

    @pytest.mark.asyncio
    async def test_record_without_patient_keeps_patient_id_unset(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        fake_client.appointments = [{"_id": "a1", "clientName": "Jane"}]
        view = await service.get_appointment("a1")

        await service.update_appointment("a1", view)

        _, payload = fake_client.updates[0]
        assert payload["clientName"] == "Jane"
        assert "patientId" not in payload
        assert "patientId" not in fake_client.appointments[0]

    @pytest.mark.asyncio
    async def test_wraps_unexpected_error(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        fake_client.appointments = [_appointment()]
        view = await service.get_appointment("apt-1")
        fake_client.update_error = RuntimeError("boom")

        with pytest.raises(AppointmentUpdateError, match="boom") as exc_info:
            await service.update_appointment("apt-1", view)

        assert exc_info.value.appointment_id == "apt-1"

    @pytest.mark.asyncio
    async def test_propagates_known_errors(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        fake_client.appointments = [_appointment()]
        view = await service.get_appointment("apt-1")
        fake_client.update_error = AppointmentUpdateError(reason="locked", appointment_id="apt-1")

        with pytest.raises(AppointmentUpdateError, match="locked"):
            await service.update_appointment("apt-1", view)


class TestSaveIntake:
    @pytest.mark.asyncio
    async def test_sends_vitals_with_bmi(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        fake_client.appointments = [_appointment()]

        view = await service.save_intake("apt-1", height_cm="180", weight_kg="81", spo2="")

        _, payload = fake_client.updates[0]
        assert payload == {
            "heightCm": "180",
            "weightKg": "81",
            "bmi": "25.0",
            "spo2": None,
            "notes": None,
        }
        assert view.bmi == "25.0"
        assert view.height_cm == "180"


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_health_check_delegates(self, service: RecordsService) -> None:
        assert await service.health_check() is True

    @pytest.mark.asyncio
    async def test_close_delegates(
        self, service: RecordsService, fake_client: FakeHMSClient
    ) -> None:
        await service.close()

        assert fake_client.closed is True
