"""
Mock messaging provider for testing.

Keeps provider state in memory and records every round-trip, so the shared
provisioning workflow can be exercised without network access.
"""

from __future__ import annotations

from dataclasses import replace

from integrations.messaging.config import MessagingConfig
from integrations.messaging.interface import (
    AVAILABLE_NUMBERS_LIMIT,
    AccountStore,
    AvailableNumber,
    MessageHandle,
    MessagingProvider,
    PhoneNumberRecord,
)
from integrations.shared.errors import ProviderRejection
from integrations.shared.logging import get_logger

logger = get_logger(__name__)


class MockMessagingProvider(MessagingProvider):
    """In-memory MessagingProvider."""

    def __init__(
        self,
        config: MessagingConfig | None = None,
        accounts: AccountStore | None = None,
    ) -> None:
        super().__init__(config or MessagingConfig(), accounts)
        self._messages: list[MessageHandle] = []
        self._incoming: list[PhoneNumberRecord] = []
        self._available: list[AvailableNumber] = []
        self._campaign_registrations: list[tuple[str, str]] = []
        self._next_sid: int = 1
        self._should_fail: bool = False
        self._fail_campaign: bool = False
        self._fail_error: str = "Mock failure"
        self._fail_status: int = 400

    def reset(self) -> None:
        self._messages.clear()
        self._incoming.clear()
        self._available.clear()
        self._campaign_registrations.clear()
        self._next_sid = 1
        self._should_fail = False
        self._fail_campaign = False

    def configure_failure(
        self,
        should_fail: bool = True,
        error_message: str = "Mock failure",
        status_code: int = 400,
    ) -> None:
        self._should_fail = should_fail
        self._fail_error = error_message
        self._fail_status = status_code

    def configure_campaign_failure(self, should_fail: bool = True) -> None:
        self._fail_campaign = should_fail

    def add_incoming_number(self, phone_number: str, friendly_name: str = "") -> PhoneNumberRecord:
        record = PhoneNumberRecord(
            sid=self._new_sid("PN"),
            phone_number=phone_number,
            friendly_name=friendly_name or phone_number,
        )
        self._incoming.append(record)
        return record

    def add_available_number(self, number: str, city: str | None = None, zip: str | None = None) -> None:
        self._available.append(AvailableNumber(number=number, city=city, zip=zip))

    @property
    def messages(self) -> list[MessageHandle]:
        return self._messages.copy()

    @property
    def campaign_registrations(self) -> list[tuple[str, str]]:
        return self._campaign_registrations.copy()

    def get_last_message(self) -> MessageHandle | None:
        return self._messages[-1] if self._messages else None

    def _new_sid(self, prefix: str) -> str:
        sid = f"{prefix}MOCK{self._next_sid:08d}"
        self._next_sid += 1
        return sid

    def _check_failure(self) -> None:
        if self._should_fail:
            raise ProviderRejection(
                message=self._fail_error,
                status_code=self._fail_status,
                body=self._fail_error,
            )

    def send_text(
        self,
        number: str,
        message: str,
        from_number: str | None = None,
    ) -> MessageHandle:
        self._check_failure()
        handle = MessageHandle(
            sid=self._new_sid("SM"),
            status="queued",
            to=number,
            from_number=from_number or self._config.twilio_from_number,
            body=message,
            raw_response={"mock": True},
        )
        self._messages.append(handle)
        logger.info("Mock SMS sent", extra={"sid": handle.sid, "to": number})
        return handle

    def purchase_number(self, number: str, friendly_name: str) -> PhoneNumberRecord:
        self._check_failure()
        return self.add_incoming_number(number, friendly_name)

    def list_incoming_numbers(self) -> list[PhoneNumberRecord]:
        self._check_failure()
        return self._incoming.copy()

    def update_webhook_urls(self, sid: str, *, voice_url: str, sms_url: str) -> None:
        self._check_failure()
        self._incoming = [
            replace(r, voice_url=voice_url, sms_url=sms_url) if r.sid == sid else r
            for r in self._incoming
        ]

    def register_campaign_number(self, sid: str, campaign_sid: str) -> None:
        if self._fail_campaign:
            raise ProviderRejection(
                message="Mock campaign registration failure",
                status_code=400,
            )
        self._campaign_registrations.append((sid, campaign_sid))

    def find_available_numbers(self, area_code: str) -> list[AvailableNumber]:
        self._check_failure()
        return self._available[:AVAILABLE_NUMBERS_LIMIT]

    def validate_webhook_signature(self, payload: bytes, signature: str, url: str) -> bool:
        return True
