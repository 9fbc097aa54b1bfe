"""
Tests for VMApiClient request shapes and error mapping.
"""

import json

import httpx
import pytest

from vmdash.client.api import VMApiClient, VMApiError
from vmdash.models.vm import VMStatus


def make_client(handler) -> VMApiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
    return VMApiClient(http, base_path="/api/")


class TestRequests:
    async def test_update_sends_status_and_resources(self):
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(
                200,
                json={
                    "id": "a",
                    "name": "n",
                    "region": "r",
                    "status": "Idling",
                    "cpu": 1,
                    "memory": 2,
                    "storage": 3,
                    "ipAddress": "1.1.1.1",
                },
            )

        api = make_client(handler)
        vm = await api.update_vm("a", VMStatus.IDLING, cpu=1, memory=2, storage=3)
        assert captured[0].method == "PUT"
        assert captured[0].url.path == "/api/vms/a"
        assert json.loads(captured[0].content) == {
            "status": "Idling",
            "cpu": 1,
            "memory": 2,
            "storage": 3,
        }
        assert vm.status is VMStatus.IDLING
        assert vm.created_at is None


class TestErrors:
    async def test_non_json_error_uses_fallback_message(self):
        api = make_client(lambda request: httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(VMApiError) as exc_info:
            await api.delete_vm("a")
        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "Failed to delete VM"

    async def test_timeout_has_no_status_code(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        api = make_client(handler)
        with pytest.raises(VMApiError) as exc_info:
            await api.list_vms()
        assert exc_info.value.status_code is None
        assert exc_info.value.message == "timed out"

    async def test_unexpected_list_shape(self):
        api = make_client(lambda request: httpx.Response(200, json={"items": []}))
        with pytest.raises(VMApiError):
            await api.list_vms()
