"""
Messaging provider interface definition.

MessagingProvider declares the provider round-trips (abstract) and builds the
provisioning workflow on top of them (concrete), so every provider shares
the same number matching and inbound routing rules.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Protocol, runtime_checkable

import anyio

from integrations.messaging.config import MessagingConfig
from integrations.messaging.numbers import (
    internationalize,
    same_number,
    strip_internationalize,
)
from integrations.shared.errors import WebhookParseError
from integrations.shared.logging import get_logger

logger = get_logger(__name__)

INBOUND_CALL_PATH = "/inbound_call"
INBOUND_SMS_PATH = "/inbound_sms"
AVAILABLE_NUMBERS_LIMIT = 8


@runtime_checkable
class Account(Protocol):
    """Account record owned by the embedding application."""

    display_name: str
    messaging_number: str | None


class AccountStore(Protocol):
    """Lookup and update capability for accounts, keyed by messaging number."""

    def find_by_messaging_number(self, number: str) -> Account | None:
        """Account whose stored number matches ``number``.

        ``number`` arrives without the +1 prefix; stored numbers may carry
        it or other formatting and must be compared on their local digits.
        """
        ...

    def assign_messaging_number(self, account: Account, number: str) -> None:
        ...


@dataclass(frozen=True)
class MessageHandle:
    """Provider handle for a sent message."""

    sid: str
    status: str
    to: str
    from_number: str
    body: str = ""
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PhoneNumberRecord:
    """Incoming phone number as listed by the provider."""

    sid: str
    phone_number: str
    friendly_name: str = ""
    sms_url: str | None = None
    voice_url: str | None = None


@dataclass(frozen=True)
class AvailableNumber:
    """Purchasable number from the provider inventory."""

    number: str | None
    city: str | None
    zip: str | None


@dataclass(frozen=True)
class WebhookConfiguration:
    """Outcome of wiring a number's inbound webhooks.

    ``warning`` is set when campaign registration failed; the webhook URLs
    are configured regardless.
    """

    sid: str | None
    sms_url: str
    voice_url: str
    warning: str | None = None

    @property
    def matched(self) -> bool:
        return self.sid is not None


class InboundRoute(NamedTuple):
    account: Account
    destination: str
    source: str


@dataclass(frozen=True)
class InboundMessage:
    """Inbound SMS webhook payload."""

    message_sid: str | None
    account_sid: str | None
    to: str
    from_number: str
    body: str = ""
    num_media: int = 0
    raw_payload: dict[str, Any] = field(default_factory=dict)


class MessagingProvider(ABC):
    """Abstract messaging provisioning client."""

    def __init__(
        self,
        config: MessagingConfig,
        accounts: AccountStore | None = None,
    ) -> None:
        self._config = config
        self._accounts = accounts

    internationalize = staticmethod(internationalize)
    strip_internationalize = staticmethod(strip_internationalize)

    @property
    def config(self) -> MessagingConfig:
        return self._config

    # -- provider round-trips -------------------------------------------------

    @abstractmethod
    def send_text(
        self,
        number: str,
        message: str,
        from_number: str | None = None,
    ) -> MessageHandle:
        """Send an SMS. Raises ProviderError if the provider rejects it."""
        ...

    @abstractmethod
    def purchase_number(self, number: str, friendly_name: str) -> PhoneNumberRecord:
        """Buy ``number`` from the provider inventory."""
        ...

    @abstractmethod
    def list_incoming_numbers(self) -> list[PhoneNumberRecord]:
        """Every number owned by the account, all pages materialized."""
        ...

    @abstractmethod
    def update_webhook_urls(self, sid: str, *, voice_url: str, sms_url: str) -> None:
        ...

    @abstractmethod
    def register_campaign_number(self, sid: str, campaign_sid: str) -> None:
        """Attach a number to a messaging campaign service."""
        ...

    @abstractmethod
    def find_available_numbers(self, area_code: str) -> list[AvailableNumber]:
        ...

    @abstractmethod
    def validate_webhook_signature(self, payload: bytes, signature: str, url: str) -> bool:
        """Validate webhook signature for authenticity."""
        ...

    # -- workflow -------------------------------------------------------------

    async def send_text_async(
        self,
        number: str,
        message: str,
        from_number: str | None = None,
    ) -> MessageHandle:
        """Run send_text in a worker thread."""
        return await anyio.to_thread.run_sync(self.send_text, number, message, from_number)

    def purchase_available_number(
        self,
        number: str,
        account: Account,
        test_mode: bool = False,
    ) -> str | None:
        """Buy ``number`` for ``account`` and wire its webhooks.

        In test mode nothing is bought and the account is left untouched,
        but the webhook URLs are still configured.
        """
        if not test_mode:
            store = self._require_accounts()
            self.purchase_number(
                number,
                friendly_name=f"{self._config.friendly_name_prefix}: {account.display_name}",
            )
            store.assign_messaging_number(account, number)
            logger.info(
                "Purchased messaging number",
                extra={"phone_number": number, "account": account.display_name},
            )

        return self.configure_webhooks(number, self._config.webhook_base_url)

    def configure_webhooks(self, number: str, base_url: str | None = None) -> str | None:
        """Point the number's voice/SMS webhooks at ``base_url``.

        Returns the provider record sid, or None if the provider does not
        list the number (yet).
        """
        return self.configure_webhooks_detailed(number, base_url).sid

    def configure_webhooks_detailed(
        self,
        number: str,
        base_url: str | None = None,
    ) -> WebhookConfiguration:
        intl = internationalize(number)
        voice_url = self._config.get_webhook_url(INBOUND_CALL_PATH, base_url)
        sms_url = self._config.get_webhook_url(INBOUND_SMS_PATH, base_url)

        matching = next(
            (r for r in self.list_incoming_numbers() if same_number(r.phone_number, intl)),
            None,
        )
        if matching is None:
            logger.info("No provider record for number", extra={"phone_number": intl})
            return WebhookConfiguration(sid=None, sms_url=sms_url, voice_url=voice_url)

        self.update_webhook_urls(matching.sid, voice_url=voice_url, sms_url=sms_url)
        logger.info(
            "Configured number webhooks",
            extra={"phone_number": intl, "sid": matching.sid, "sms_url": sms_url},
        )

        warning = self._register_campaign(matching.sid)
        return WebhookConfiguration(
            sid=matching.sid,
            sms_url=sms_url,
            voice_url=voice_url,
            warning=warning,
        )

    def _register_campaign(self, sid: str) -> str | None:
        campaign_sid = self._config.twilio_campaign_sid
        if not campaign_sid:
            logger.warning("No messaging campaign configured", extra={"sid": sid})
            return "messaging campaign not configured"

        try:
            self.register_campaign_number(sid, campaign_sid)
        except Exception as e:
            logger.exception(
                f"Error setting up messaging service campaign: {e!s}",
                extra={
                    "sid": sid,
                    "campaign_sid": campaign_sid,
                    "error_code": getattr(e, "error_code", None),
                },
            )
            return f"campaign registration failed: {e!s}"
        return None

    def get_webhook_urls(self, number: str) -> tuple[str | None, str | None]:
        """Return (sms_url, voice_url) for an exact number match."""
        intl = internationalize(number)
        matching = next(
            (r for r in self.list_incoming_numbers() if r.phone_number == intl),
            None,
        )
        if matching is None:
            return None, None
        return matching.sms_url, matching.voice_url

    def verify_account_sid(self, sid: str | None) -> bool:
        configured = self._config.twilio_account_sid
        return bool(configured) and configured == sid

    def resolve_inbound_account(self, to_number: str, from_number: str) -> InboundRoute | None:
        """Find the account that owns ``to_number``.

        None means the message is unroutable; callers should not treat that
        as a failure.
        """
        store = self._require_accounts()
        destination = strip_internationalize(to_number)
        source = strip_internationalize(from_number)

        account = store.find_by_messaging_number(destination)
        if account is None:
            logger.warning(
                "Unroutable inbound message",
                extra={"destination": destination, "source": source},
            )
            return None

        return InboundRoute(account, destination, source)

    def parse_inbound_message(self, payload: dict[str, Any]) -> InboundMessage:
        to = payload.get("To")
        from_number = payload.get("From")

        if not to:
            raise WebhookParseError(
                message="Missing To in webhook payload",
                error_code="MISSING_TO",
                provider_response=payload,
            )
        if not from_number:
            raise WebhookParseError(
                message="Missing From in webhook payload",
                error_code="MISSING_FROM",
                provider_response=payload,
            )

        num_media = 0
        if payload.get("NumMedia"):
            try:
                num_media = int(payload["NumMedia"])
            except (ValueError, TypeError):
                pass

        return InboundMessage(
            message_sid=payload.get("MessageSid") or payload.get("SmsSid"),
            account_sid=payload.get("AccountSid"),
            to=to,
            from_number=from_number,
            body=payload.get("Body") or "",
            num_media=num_media,
            raw_payload=dict(payload),
        )

    def _require_accounts(self) -> AccountStore:
        if self._accounts is None:
            raise ValueError("An AccountStore is required for this operation")
        return self._accounts
