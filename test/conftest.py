"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import pytest

from integrations.generation.config import GenerationConfig
from integrations.messaging.accounts import AccountRecord, InMemoryAccountStore
from integrations.messaging.config import MessagingConfig, ProviderType

PNG_STUB = b"\x89PNG\r\n\x1a\n\x00\x00"


@pytest.fixture
def twilio_config() -> MessagingConfig:
    return MessagingConfig(
        provider_type=ProviderType.TWILIO,
        twilio_account_sid="AC_TEST_ACCOUNT_SID",
        twilio_auth_token="test_auth_token_12345",
        twilio_from_number="+14155550000",
        twilio_campaign_sid="MG_TEST_CAMPAIGN",
        webhook_base_url="https://example.com",
    )


@pytest.fixture
def mock_config() -> MessagingConfig:
    return MessagingConfig(
        provider_type=ProviderType.MOCK,
        twilio_account_sid="AC_MOCK",
        twilio_auth_token="",
        twilio_from_number="+14155550000",
        twilio_campaign_sid="MG_MOCK_CAMPAIGN",
        webhook_base_url="https://hooks.example.com/",
    )


@pytest.fixture
def generation_config() -> GenerationConfig:
    return GenerationConfig(
        api_key="sk-test",
        base_url="https://api.openai.test/v1",
        image_model="gpt-image-1",
        image_response_format=None,
        speech_model="gpt-4o-mini-tts",
    )


@pytest.fixture
def acme() -> AccountRecord:
    return AccountRecord(display_name="Acme", messaging_number="5551234567")


@pytest.fixture
def account_store(acme: AccountRecord) -> InMemoryAccountStore:
    return InMemoryAccountStore([acme, AccountRecord(display_name="Unassigned")])


@pytest.fixture
def png_stub() -> bytes:
    return PNG_STUB
