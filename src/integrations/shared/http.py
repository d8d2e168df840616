"""
httpx-backed base for provider clients.

Owns the lazily created httpx.Client (or uses an injected one) and maps
transport failures and non-2xx responses onto the shared error taxonomy.
Subclasses pick the concrete error classes.
"""

from __future__ import annotations

import threading
from typing import Any

import httpx

from integrations.shared.errors import ProviderError, ProviderRejection, TransportError
from integrations.shared.logging import get_logger

logger = get_logger(__name__)


class HTTPProviderClient:
    """Shared plumbing for a single-attempt provider HTTP client."""

    provider_name = "provider"
    transport_error: type[TransportError] = TransportError
    rejection_error: type[ProviderRejection] = ProviderRejection
    invalid_response_error: type[ProviderError] = ProviderError

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._http_client = http_client
        self._owns_client = http_client is None
        self._timeout_seconds = timeout_seconds
        self._client_lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        with self._client_lock:
            if self._http_client is None:
                self._http_client = httpx.Client(timeout=httpx.Timeout(self._timeout_seconds))
            return self._http_client

    def close(self) -> None:
        with self._client_lock:
            if self._owns_client and self._http_client is not None:
                self._http_client.close()
                self._http_client = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, url: str, *, operation: str, **kwargs: Any) -> httpx.Response:
        """Send one request; raise on transport failure or non-2xx status."""
        client = self._get_client()
        try:
            response = client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.exception(
                f"HTTP error during {self.provider_name} {operation}",
                extra={"operation": operation},
            )
            raise self.transport_error(
                message=f"HTTP error: {e!s}",
                error_code="HTTP_ERROR",
            ) from e

        if not response.is_success:
            raise self._rejection(response, operation)
        return response

    def _json_object(self, response: httpx.Response, operation: str) -> dict[str, Any]:
        """Decode a success body that must be a JSON object."""
        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"{self.provider_name} {operation} returned a non-JSON body",
                extra={"operation": operation, "status_code": response.status_code},
            )
            raise self.invalid_response_error(
                message=f"{self.provider_name} {operation} response is not JSON",
                error_code="INVALID_RESPONSE",
            ) from e
        if not isinstance(data, dict):
            logger.error(
                f"{self.provider_name} {operation} returned unexpected JSON",
                extra={"operation": operation, "status_code": response.status_code},
            )
            raise self.invalid_response_error(
                message=f"{self.provider_name} {operation} response is not a JSON object",
                error_code="INVALID_RESPONSE",
            )
        return data

    def _rejection(self, response: httpx.Response, operation: str) -> ProviderRejection:
        error_data = _json_or_empty(response)
        logger.error(
            f"{self.provider_name} {operation} failed",
            extra={
                "operation": operation,
                "status_code": response.status_code,
                "error": error_data,
            },
        )
        code = error_data.get("code")
        return self.rejection_error(
            message=self._rejection_message(error_data, response),
            status_code=response.status_code,
            body=response.text,
            error_code=str(code) if code is not None else None,
            provider_response=error_data,
        )

    def _rejection_message(self, error_data: dict[str, Any], response: httpx.Response) -> str:
        message = error_data.get("message")
        if isinstance(message, str) and message:
            return message
        return f"{self.provider_name} error {response.status_code}: {response.text}"


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
