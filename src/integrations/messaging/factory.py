"""
Messaging provider factory.

Single source of truth for configuration: MessagingConfig (pydantic-settings),
loaded once. Never read raw os.getenv("TWILIO_*") here.
"""

from __future__ import annotations

from functools import lru_cache

from integrations.messaging.config import MessagingConfig, ProviderType
from integrations.messaging.config import get_messaging_config as _load_messaging_config
from integrations.messaging.interface import AccountStore, MessagingProvider
from integrations.messaging.mock_client import MockMessagingProvider
from integrations.messaging.twilio_client import TwilioMessagingClient
from integrations.shared.logging import get_logger, mask_secret

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_messaging_config() -> MessagingConfig:
    """Return the process-wide MessagingConfig, loaded on first use."""
    return _load_messaging_config()


def create_messaging_provider(
    config: MessagingConfig | None = None,
    accounts: AccountStore | None = None,
) -> MessagingProvider:
    """Build the messaging provider selected by ``config.provider_type``."""
    cfg = config or get_messaging_config()

    logger.info(
        "Messaging config resolved",
        extra={
            "provider_type": cfg.provider_type.value,
            "twilio_account_sid": mask_secret(cfg.twilio_account_sid),
            "twilio_from_number": cfg.twilio_from_number,
            "webhook_base_url": cfg.webhook_base_url,
            "campaign_configured": bool(cfg.twilio_campaign_sid),
        },
    )

    if cfg.provider_type == ProviderType.TWILIO:
        return TwilioMessagingClient(cfg, accounts=accounts)

    if cfg.provider_type == ProviderType.MOCK:
        return MockMessagingProvider(cfg, accounts=accounts)

    raise ValueError(f"Unsupported messaging provider_type: {cfg.provider_type}")
