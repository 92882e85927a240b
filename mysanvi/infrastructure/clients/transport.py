"""Shared HTTP transport for the SaGer and Mandii clients"""

import time

import httpx
from typing import Any, Dict, Optional
from mysanvi.config import settings
from mysanvi.domain.exceptions import DecodeError, HttpError, NetworkError
from mysanvi.infrastructure.observability.logging import log_request, log_response
from mysanvi.infrastructure.observability.metrics import (
    backend_latency_histogram,
    backend_request_counter,
    record_failure,
)


def build_timeout(seconds: float) -> httpx.Timeout:
    """Same ceiling for connect, read, write and pool acquisition"""
    return httpx.Timeout(seconds, connect=seconds, read=seconds, write=seconds)


def build_http_client(
    backend: str,
    base_url: str,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create an AsyncClient with request/response logging and metrics hooks.

    Both backends go through here so they share one transport configuration
    and differ only by base URL.
    """

    async def on_request(request: httpx.Request) -> None:
        request.extensions["mysanvi_started"] = time.perf_counter()
        log_request(backend, request.method, str(request.url))

    async def on_response(response: httpx.Response) -> None:
        await response.aread()
        request = response.request
        elapsed = time.perf_counter() - request.extensions.get("mysanvi_started", time.perf_counter())
        backend_latency_histogram.labels(backend=backend).observe(elapsed)
        backend_request_counter.labels(
            backend=backend,
            method=request.method,
            status=str(response.status_code),
        ).inc()
        log_response(
            backend,
            request.method,
            str(request.url),
            response.status_code,
            round(elapsed * 1000, 2),
            body=response.text,
        )

    return httpx.AsyncClient(
        base_url=base_url,
        timeout=build_timeout(timeout),
        transport=transport,
        event_hooks={"request": [on_request], "response": [on_response]},
    )


def error_message(response: httpx.Response) -> str:
    """Prefer the backend's JSON `detail`, then raw text, then the reason phrase"""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("detail"):
        return str(data["detail"])
    return response.text or response.reason_phrase


class BackendClient:
    """Base class for a JSON REST backend; subclasses add typed operations"""

    backend = "backend"

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        auth_header: Optional[str] = None,
    ) -> Any:
        """
        Perform one call and return the decoded JSON body (None when empty).

        Raises:
            NetworkError: Timeout or no response received
            HttpError: Non-2xx response
            DecodeError: Body is not JSON
        """
        headers = {"Authorization": auth_header} if auth_header else None
        async with build_http_client(self.backend, self.base_url, self.timeout, self.transport) as client:
            try:
                response = await client.request(method, path, json=json, params=params, headers=headers)
                response.raise_for_status()
            except httpx.TimeoutException as e:
                error = NetworkError(f"{self.backend} timeout after {self.timeout}s")
                record_failure(self.backend, error)
                raise error from e
            except httpx.HTTPStatusError as e:
                error = HttpError(e.response.status_code, error_message(e.response))
                record_failure(self.backend, error)
                raise error from e
            except httpx.RequestError as e:
                error = NetworkError(f"{self.backend} unreachable: {e}")
                record_failure(self.backend, error)
                raise error from e

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            error = DecodeError(f"Invalid JSON from {self.backend}: {e}")
            record_failure(self.backend, error)
            raise error from e

    def _decode_failed(self, what: str, cause: Exception) -> DecodeError:
        error = DecodeError(f"Invalid {what} data from {self.backend}: {cause!r}")
        record_failure(self.backend, error)
        return error
