from typing import Any

import httpx
from loguru import logger

from hms_records.domain.exceptions import (
    AppointmentNotFoundError,
    AppointmentUpdateError,
    HMSUnavailableError,
)

_APPOINTMENTS_PATH = "/appointments"
_PATIENTS_PATH = "/patients"


class RestHMSClient:
    """Hospital backend client via its REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str = "",
        timeout: float = 30,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token: str | None = token or None
        self._client = httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_json: bool = True,
    ) -> Any:
        """Execute a request and return the decoded JSON body.

        An empty body (e.g. ``204 No Content``) decodes to ``None``. With
        ``require_json=False`` a non-JSON success body also gives ``None``.
        """
        url = f"{self._base_url}{path}"
        logger.debug("{} {}", method, url)
        try:
            resp = await self._client.request(
                method, url, headers=self._headers(), json=json, params=params
            )
            resp.raise_for_status()
            if not resp.content:
                return None
            if not require_json:
                try:
                    return resp.json()
                except ValueError:
                    logger.debug("{} {} returned a non-JSON body", method, url)
                    return None
            return resp.json()
        except httpx.HTTPStatusError:
            raise
        except Exception as exc:
            raise HMSUnavailableError(f"{method} {path} failed: {exc}") from exc

    async def fetch_appointments(self) -> list[Any]:
        try:
            data = await self._request("GET", _APPOINTMENTS_PATH)
        except httpx.HTTPStatusError as exc:
            raise HMSUnavailableError(_error_message(exc, "Failed to fetch appointments")) from exc
        appointments = _unwrap_list(data, "appointments")
        logger.info("Fetched {} appointments", len(appointments))
        return appointments

    async def fetch_appointment_by_id(self, appointment_id: str) -> dict[str, Any]:
        try:
            data = await self._request("GET", f"{_APPOINTMENTS_PATH}/{appointment_id}")
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise AppointmentNotFoundError(appointment_id) from exc
            raise HMSUnavailableError(_error_message(exc, "Failed to fetch appointment")) from exc

        appointment = _unwrap_object(data, "appointment")
        if appointment is None:
            raise AppointmentNotFoundError(appointment_id)
        return appointment

    async def fetch_patients(self) -> list[Any]:
        try:
            data = await self._request("GET", _PATIENTS_PATH)
        except httpx.HTTPStatusError as exc:
            raise HMSUnavailableError(_error_message(exc, "Failed to fetch patients")) from exc
        patients = _unwrap_list(data, "patients")
        logger.info("Fetched {} patients", len(patients))
        return patients

    async def update_appointment(
        self, appointment_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            data = await self._request(
                "PUT",
                f"{_APPOINTMENTS_PATH}/{appointment_id}",
                json=payload,
                require_json=False,
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise AppointmentNotFoundError(appointment_id) from exc
            raise AppointmentUpdateError(
                reason=_error_message(exc, "Failed to update appointment"),
                appointment_id=appointment_id,
            ) from exc

        logger.info("Appointment {} updated", appointment_id)
        return _unwrap_object(data, "appointment") or {}

    async def health_check(self) -> bool:
        try:
            await self._request("GET", _APPOINTMENTS_PATH, params={"limit": 1})
            return True
        except Exception as exc:
            logger.warning("HMS backend health check failed: {}", exc)
            return False

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("HMS REST client closed")


def _unwrap_list(data: Any, key: str) -> list[Any]:
    """Accept ``[...]``, ``{key: [...]}`` or ``{"data": [...]}`` envelopes."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for candidate in (data.get(key), data.get("data")):
            if isinstance(candidate, list):
                return candidate
        return []
    raise HMSUnavailableError(f"Unexpected response body: {type(data).__name__}")


def _unwrap_object(data: Any, key: str) -> dict[str, Any] | None:
    """Accept ``{key: {...}}``, ``{"data": {...}}`` or a bare record."""
    if not isinstance(data, dict):
        return None
    for candidate in (data.get(key), data.get("data")):
        if isinstance(candidate, dict):
            return candidate
    return data or None


def _error_message(exc: httpx.HTTPStatusError, default: str) -> str:
    """Prefer the backend's ``message`` field over a generic description."""
    try:
        body = exc.response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("message"), str) and body["message"]:
        return body["message"]
    return f"{default} (status {exc.response.status_code})"
