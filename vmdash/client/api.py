"""
VMApiClient: async HTTP wrapper over the /vms CRUD contract.

Any non-2xx answer, transport failure or unparseable body is raised as
VMApiError so callers deal with a single exception type.
"""

import logging

import httpx

from vmdash.config import Settings, settings as default_settings
from vmdash.models.vm import VMStatus
from vmdash.schemas.vm import VMCreate, VMResponse

logger = logging.getLogger(__name__)


class VMApiError(Exception):
    """A failed call to the VM API.

    ``status_code`` is None when no HTTP response was received.
    """

    def __init__(
        self, message: str, status_code: int | None = None, details: object = None
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


def _error_from_response(response: httpx.Response, fallback_message: str) -> VMApiError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    details = body.get("details")
    if isinstance(details, str) and details:
        message = details
    else:
        message = body.get("error") or fallback_message
    return VMApiError(str(message), status_code=response.status_code, details=details)


class VMApiClient:
    def __init__(self, http: httpx.AsyncClient, base_path: str = "") -> None:
        self._http = http
        self._base_path = base_path.rstrip("/")

    @classmethod
    def from_settings(cls, app_settings: Settings | None = None) -> "VMApiClient":
        app_settings = app_settings or default_settings
        http = httpx.AsyncClient(
            base_url=app_settings.api_base_url,
            timeout=app_settings.api_timeout_s,
            headers={"Content-Type": "application/json"},
        )
        return cls(http)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        fallback_message: str,
        json: dict[str, object] | None = None,
    ) -> httpx.Response:
        url = f"{self._base_path}{path}"
        try:
            response = await self._http.request(method, url, json=json)
        except httpx.HTTPError as exc:
            logger.warning(
                "VM API unreachable",
                extra={"method": method, "url": url, "exc_type": type(exc).__name__},
            )
            raise VMApiError(str(exc) or fallback_message) from exc

        if response.is_error:
            error = _error_from_response(response, fallback_message)
            logger.warning(
                "VM API error",
                extra={"method": method, "url": url, "status_code": response.status_code},
            )
            raise error
        return response

    @staticmethod
    def _parse(response: httpx.Response) -> object:
        try:
            return response.json()
        except ValueError as exc:
            raise VMApiError("Invalid JSON from VM API", status_code=response.status_code) from exc

    async def list_vms(self) -> list[VMResponse]:
        response = await self._request("GET", "/vms", "Failed to fetch VMs")
        data = self._parse(response)
        if not isinstance(data, list):
            raise VMApiError("Expected a list of VMs", status_code=response.status_code)
        try:
            return [VMResponse.model_validate(item) for item in data]
        except ValueError as exc:
            raise VMApiError("Malformed VM record", status_code=response.status_code) from exc

    async def create_vm(self, payload: VMCreate) -> VMResponse:
        response = await self._request(
            "POST",
            "/vms",
            "Failed to create VM",
            json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return self._to_vm(response)

    async def update_vm(
        self,
        vm_id: str,
        status: VMStatus,
        cpu: int | None = None,
        memory: int | None = None,
        storage: int | None = None,
    ) -> VMResponse:
        body: dict[str, object] = {"status": status.value}
        for key, value in (("cpu", cpu), ("memory", memory), ("storage", storage)):
            if value is not None:
                body[key] = value
        response = await self._request(
            "PUT", f"/vms/{vm_id}", "Failed to update VM status", json=body
        )
        return self._to_vm(response)

    async def delete_vm(self, vm_id: str) -> None:
        await self._request("DELETE", f"/vms/{vm_id}", "Failed to delete VM")

    def _to_vm(self, response: httpx.Response) -> VMResponse:
        try:
            return VMResponse.model_validate(self._parse(response))
        except ValueError as exc:
            raise VMApiError("Malformed VM record", status_code=response.status_code) from exc
