"""Integration tests for the shared HTTP transport"""

import logging

import httpx
import pytest
from mysanvi.domain.exceptions import DecodeError, HttpError, NetworkError
from mysanvi.infrastructure.clients.transport import BackendClient, build_http_client, error_message


def make_client(handler) -> BackendClient:
    return BackendClient("http://backend.test/", transport=httpx.MockTransport(handler))


def test_default_timeout_is_thirty_seconds():
    client = build_http_client("sager", "http://backend.test/", 30.0)
    assert client.timeout.connect == 30.0
    assert client.timeout.read == 30.0
    assert client.timeout.write == 30.0


def test_backend_client_uses_configured_timeout():
    assert BackendClient("http://backend.test/").timeout == 30.0


async def test_authorization_header_forwarded():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["authorization"] = request.headers.get("Authorization")
        seen["url"] = str(request.url)
        return httpx.Response(200, json=[])

    await make_client(handler)._request("GET", "api/sales/", auth_header="Bearer a1")

    assert seen == {"authorization": "Bearer a1", "url": "http://backend.test/api/sales/"}


async def test_empty_body_returns_none():
    assert await make_client(lambda request: httpx.Response(204))._request("DELETE", "api/sales/1/") is None


async def test_http_error_carries_detail():
    client = make_client(lambda request: httpx.Response(403, json={"detail": "Forbidden shop"}))

    with pytest.raises(HttpError) as exc_info:
        await client._request("GET", "api/sales/")

    assert exc_info.value.status == 403
    assert exc_info.value.message == "Forbidden shop"


def test_error_message_falls_back_to_text():
    assert error_message(httpx.Response(502, text="Bad gateway from proxy")) == "Bad gateway from proxy"
    assert error_message(httpx.Response(500)) == "Internal Server Error"


async def test_timeout_becomes_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("slow", request=request)

    with pytest.raises(NetworkError):
        await make_client(handler)._request("GET", "api/sales/")


async def test_non_json_body_becomes_decode_error():
    client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(DecodeError):
        await client._request("GET", "api/sales/")


async def test_requests_and_responses_are_logged(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG)

    await make_client(lambda request: httpx.Response(200, json={"ok": True}))._request("GET", "health")

    messages = [record.getMessage() for record in caplog.records]
    assert "Backend request" in messages
    assert "Backend response" in messages
    response_record = next(r for r in caplog.records if r.getMessage() == "Backend response")
    assert response_record.status_code == 200
