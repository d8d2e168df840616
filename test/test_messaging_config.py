"""
Tests for messaging and generation configuration.
"""

import pytest
from pydantic import ValidationError

from integrations.generation.config import GenerationConfig
from integrations.messaging.config import MessagingConfig, ProviderType


class TestMessagingConfig:
    def test_default_values(self) -> None:
        # Environment variables may override runtime defaults; check the declared ones.
        fields = MessagingConfig.model_fields
        assert fields["provider_type"].default == ProviderType.TWILIO
        assert fields["country_code"].default == "US"
        assert fields["twilio_api_base"].default == "https://api.twilio.com/2010-04-01"

    def test_custom_values(self, twilio_config: MessagingConfig) -> None:
        assert twilio_config.twilio_account_sid == "AC_TEST_ACCOUNT_SID"
        assert twilio_config.twilio_from_number == "+14155550000"
        assert twilio_config.twilio_campaign_sid == "MG_TEST_CAMPAIGN"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MESSAGING_TWILIO_ACCOUNT_SID", "AC_FROM_ENV")
        monkeypatch.setenv("MESSAGING_WEBHOOK_BASE_URL", "https://env.example.com")

        config = MessagingConfig()

        assert config.twilio_account_sid == "AC_FROM_ENV"
        assert config.webhook_base_url == "https://env.example.com"

    def test_is_frozen(self, twilio_config: MessagingConfig) -> None:
        with pytest.raises(ValidationError):
            twilio_config.twilio_auth_token = "changed"

    def test_credentials_not_in_repr(self, twilio_config: MessagingConfig) -> None:
        text = repr(twilio_config)
        assert "test_auth_token_12345" not in text
        assert "AC_TEST_ACCOUNT_SID" not in text

    def test_get_webhook_url(self, twilio_config: MessagingConfig) -> None:
        assert twilio_config.get_webhook_url("/inbound_sms") == "https://example.com/inbound_sms"
        assert (
            twilio_config.get_webhook_url("/inbound_call", "https://other.example.com/")
            == "https://other.example.com/inbound_call"
        )

    def test_invalid_country_code(self) -> None:
        with pytest.raises(ValidationError):
            MessagingConfig(country_code="USA")


class TestGenerationConfig:
    def test_default_values(self) -> None:
        fields = GenerationConfig.model_fields
        assert fields["default_image_size"].default == "1024x1024"
        assert fields["default_voice"].default == "alloy"
        assert fields["default_audio_format"].default == "mp3"
        assert fields["image_response_format"].default is None

    def test_reads_openai_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")
        monkeypatch.setenv("OPENAI_IMAGE_MODEL", "dall-e-3")

        config = GenerationConfig()

        assert config.api_key == "sk-from-env"
        assert config.image_model == "dall-e-3"
        assert "sk-from-env" not in repr(config)
