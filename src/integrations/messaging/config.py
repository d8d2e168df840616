"""
Messaging provider configuration.

Read once from the environment (MESSAGING_* variables or .env) and frozen.
Clients receive the instance explicitly.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderType(str, Enum):
    """Supported messaging provider types."""

    TWILIO = "twilio"
    MOCK = "mock"


class MessagingConfig(BaseSettings):
    """Messaging provider configuration from environment."""

    model_config = SettingsConfigDict(
        env_prefix="MESSAGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    provider_type: ProviderType = Field(default=ProviderType.TWILIO)

    # Provider credentials (never logged)
    twilio_account_sid: str = Field(default="", repr=False)
    twilio_auth_token: str = Field(default="", repr=False)
    twilio_from_number: str = Field(default="")

    # Messaging Service that purchased numbers are registered with
    twilio_campaign_sid: str = Field(default="")

    # Public base URL for inbound_call / inbound_sms webhooks
    webhook_base_url: str = Field(default="http://localhost:8000")

    country_code: str = Field(default="US", min_length=2, max_length=2)
    friendly_name_prefix: str = Field(default="PROVIDER INTEGRATIONS")

    twilio_api_base: str = Field(default="https://api.twilio.com/2010-04-01")
    twilio_messaging_api_base: str = Field(default="https://messaging.twilio.com/v1")

    http_timeout_seconds: float = Field(default=30.0, gt=0, le=300)

    def get_webhook_url(self, path: str, base_url: str | None = None) -> str:
        base = (base_url or self.webhook_base_url).rstrip("/")
        return f"{base}{path}"


def get_messaging_config() -> MessagingConfig:
    return MessagingConfig()

