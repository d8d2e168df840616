"""
Error taxonomy shared by the provider clients.

- TransportError: the request never got a response (network, DNS, TLS).
- ProviderRejection: the provider answered with a non-2xx status.
- ProviderSoftError: 2xx response that embeds a provider error object.
- WebhookParseError: an inbound webhook payload could not be parsed.

Lookups that find nothing return None instead of raising.
"""

from typing import Any


class ProviderError(Exception):
    """Base exception for provider integration errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        provider_response: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.provider_response = provider_response or {}


class TransportError(ProviderError):
    """Network-level failure talking to the provider."""


class ProviderRejection(ProviderError):
    """Non-success HTTP response from the provider."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        error_code: str | None = None,
        provider_response: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code or str(status_code),
            provider_response=provider_response,
        )
        self.status_code = status_code
        self.body = body


class ProviderSoftError(ProviderError):
    """Success status with an application-level error payload."""


class WebhookParseError(ProviderError):
    """Error parsing an inbound webhook payload."""
