import json
from unittest.mock import Mock

import httpx
import pytest

from hvac_ops.sheets import (
    NotConnectedError,
    RequestFailed,
    SheetsConfig,
    SheetsGateway,
    TransportError,
    decode_envelope,
)
from hvac_ops.sheets.exceptions import GENERIC_FAILURE_MESSAGE


class TestSheetsConfig:
    """Unit tests for endpoint configuration"""

    def test_unset_endpoint_is_not_connected(self):
        assert SheetsConfig().is_connected is False
        assert SheetsConfig(endpoint_url="   ").is_connected is False

    def test_endpoint_is_connected(self):
        assert SheetsConfig(endpoint_url="https://script.example.com/exec").is_connected is True

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("HVAC_SHEETS_ENDPOINT_URL", " https://script.example.com/exec ")
        monkeypatch.setenv("HVAC_SHEETS_TIMEOUT", "5")
        config = SheetsConfig.from_env()
        assert config.endpoint_url == "https://script.example.com/exec"
        assert config.timeout == 5.0

    def test_from_env_falls_back_to_frontend_variable(self, monkeypatch):
        monkeypatch.delenv("HVAC_SHEETS_ENDPOINT_URL", raising=False)
        monkeypatch.setenv("VITE_GOOGLE_SCRIPT_URL", "https://script.example.com/vite")
        assert SheetsConfig.from_env().endpoint_url == "https://script.example.com/vite"

    def test_from_env_without_endpoint(self, monkeypatch):
        monkeypatch.delenv("HVAC_SHEETS_ENDPOINT_URL", raising=False)
        monkeypatch.delenv("VITE_GOOGLE_SCRIPT_URL", raising=False)
        assert SheetsConfig.from_env().is_connected is False


class TestDecodeEnvelope:
    """Unit tests for envelope validation"""

    def test_success_returns_envelope(self):
        envelope = decode_envelope({"success": True, "data": [1, 2]})
        assert envelope.data == [1, 2]

    def test_failure_carries_remote_message(self):
        with pytest.raises(RequestFailed) as exc:
            decode_envelope({"success": False, "error": "X"})
        assert exc.value.message == "X"
        assert str(exc.value) == "X"

    def test_failure_without_message_uses_generic_text(self):
        with pytest.raises(RequestFailed) as exc:
            decode_envelope({"success": False})
        assert exc.value.message == GENERIC_FAILURE_MESSAGE
        assert exc.value.message

    def test_failure_with_blank_message_uses_generic_text(self):
        with pytest.raises(RequestFailed) as exc:
            decode_envelope({"success": False, "error": ""})
        assert exc.value.message == GENERIC_FAILURE_MESSAGE

    def test_non_object_is_transport_error(self):
        with pytest.raises(TransportError):
            decode_envelope(["not", "an", "envelope"])

    def test_missing_success_is_transport_error(self):
        with pytest.raises(TransportError):
            decode_envelope({"data": []})


class TestSheetsGateway:
    """Unit tests for the gateway wire format and error surfacing"""

    @pytest.mark.asyncio
    async def test_not_connected_makes_no_request(self):
        handler = Mock()
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        gateway = SheetsGateway(SheetsConfig(endpoint_url=None), http_client=client)

        assert gateway.is_connected is False
        with pytest.raises(NotConnectedError):
            await gateway.get({"action": "getAll", "sheet": "Customers"})
        with pytest.raises(NotConnectedError):
            await gateway.post({"action": "delete", "sheet": "Customers", "id": "1"})
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_encodes_query_and_returns_data(self, gateway_factory):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"success": True, "data": [{"id": "1"}]})

        gateway = gateway_factory(handler)
        data = await gateway.get({"action": "getByProject", "sheet": "Payments",
                                  "projectId": "7 & 8", "skip": None})

        assert data == [{"id": "1"}]
        request = seen[0]
        assert request.method == "GET"
        assert request.url.params["action"] == "getByProject"
        assert request.url.params["sheet"] == "Payments"
        assert request.url.params["projectId"] == "7 & 8"
        assert "skip" not in request.url.params
        assert "7+%26+8" in str(request.url) or "7%20%26%208" in str(request.url)

    @pytest.mark.asyncio
    async def test_post_sends_json_as_plain_text(self, gateway_factory):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"success": True, "data": {"id": "9"}})

        gateway = gateway_factory(handler)
        body = {"action": "create", "sheet": "Customers", "record": {"firstName": "José"}}
        data = await gateway.post(body)

        assert data == {"id": "9"}
        request = seen[0]
        assert request.method == "POST"
        assert request.headers["content-type"].startswith("text/plain")
        assert json.loads(request.content.decode("utf-8")) == body

    @pytest.mark.asyncio
    async def test_post_without_data_returns_envelope(self, gateway_factory):
        gateway = gateway_factory(lambda request: httpx.Response(200, json={"success": True}))
        data = await gateway.post({"action": "delete", "sheet": "Photos", "id": "3"})
        assert data["success"] is True

    @pytest.mark.asyncio
    async def test_remote_failure_message_surfaces(self, gateway_factory):
        gateway = gateway_factory(
            lambda request: httpx.Response(200, json={"success": False, "error": "X"}))
        with pytest.raises(RequestFailed) as exc:
            await gateway.get({"action": "getById", "sheet": "Projects", "id": "404"})
        assert exc.value.message == "X"

    @pytest.mark.asyncio
    async def test_remote_failure_without_message(self, gateway_factory):
        gateway = gateway_factory(lambda request: httpx.Response(200, json={"success": False}))
        with pytest.raises(RequestFailed) as exc:
            await gateway.post({"action": "update", "sheet": "Projects", "id": "1", "record": {}})
        assert exc.value.message

    @pytest.mark.asyncio
    async def test_non_json_body_is_transport_error(self, gateway_factory):
        gateway = gateway_factory(lambda request: httpx.Response(200, text="<html>Sign in</html>"))
        with pytest.raises(TransportError):
            await gateway.get({"action": "getAll", "sheet": "Customers"})

    @pytest.mark.asyncio
    async def test_http_error_status_is_transport_error(self, gateway_factory):
        gateway = gateway_factory(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(TransportError) as exc:
            await gateway.get({"action": "getAll", "sheet": "Customers"})
        assert exc.value.status_code == 500

    @pytest.mark.asyncio
    async def test_network_failure_is_transport_error_and_not_retried(self, gateway_factory):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("name resolution failed", request=request)

        gateway = gateway_factory(handler)
        with pytest.raises(TransportError):
            await gateway.get({"action": "getAll", "sheet": "Customers"})
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_malformed_endpoint_is_transport_error(self, gateway_factory):
        calls = []
        gateway = gateway_factory(calls.append, "https://script.example.com/exec\x01")
        with pytest.raises(TransportError):
            await gateway.get({"action": "getAll", "sheet": "Customers"})
        assert calls == []

    @pytest.mark.asyncio
    async def test_follows_redirects(self, gateway_factory):
        def handler(request):
            if request.url.host == "script.example.com":
                return httpx.Response(302, headers={"Location": "https://content.example.com/echo"})
            return httpx.Response(200, json={"success": True, "data": []})

        gateway = gateway_factory(handler)
        assert await gateway.get({"action": "getAll", "sheet": "Photos"}) == []

    @pytest.mark.asyncio
    async def test_health_check(self, gateway, gateway_factory):
        assert await gateway.health_check() is True

        broken = gateway_factory(lambda request: httpx.Response(200, text="nope"))
        assert await broken.health_check() is False

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_client(self):
        async with SheetsGateway(SheetsConfig(endpoint_url="https://script.example.com/exec")) as gw:
            client = gw._client()
            assert client.is_closed is False
        assert client.is_closed is True
