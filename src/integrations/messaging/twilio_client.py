"""
Twilio messaging provider.

Talks to the Twilio REST API with httpx (form-encoded bodies, basic auth).
Every call is a single attempt; failures surface as ProviderError subclasses.
"""

from __future__ import annotations

import hashlib
import hmac
from base64 import b64encode
from typing import Any
from urllib.parse import parse_qs

import httpx

from integrations.messaging.config import MessagingConfig, get_messaging_config
from integrations.messaging.interface import (
    AVAILABLE_NUMBERS_LIMIT,
    AccountStore,
    AvailableNumber,
    MessageHandle,
    MessagingProvider,
    PhoneNumberRecord,
)
from integrations.shared.http import HTTPProviderClient
from integrations.shared.logging import get_logger, mask_secret

logger = get_logger(__name__)

# Largest page Twilio serves for list endpoints.
LIST_PAGE_SIZE = 1000


class TwilioMessagingClient(HTTPProviderClient, MessagingProvider):
    """Twilio implementation of MessagingProvider."""

    provider_name = "Twilio"

    def __init__(
        self,
        config: MessagingConfig | None = None,
        accounts: AccountStore | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        config = config or get_messaging_config()
        MessagingProvider.__init__(self, config, accounts)
        HTTPProviderClient.__init__(
            self,
            http_client=http_client,
            timeout_seconds=config.http_timeout_seconds,
        )

    def _get_auth(self) -> tuple[str, str]:
        return (self._config.twilio_account_sid, self._config.twilio_auth_token)

    def _get_api_url(self, endpoint: str) -> str:
        base = self._config.twilio_api_base.rstrip("/")
        return f"{base}/Accounts/{self._config.twilio_account_sid}{endpoint}"

    def send_text(
        self,
        number: str,
        message: str,
        from_number: str | None = None,
    ) -> MessageHandle:
        sender = from_number or self._config.twilio_from_number

        logger.info(
            "Sending Twilio SMS",
            extra={"to": number, "from_number": sender, "length": len(message)},
        )

        response = self._request(
            "POST",
            self._get_api_url("/Messages.json"),
            operation="send_text",
            data={"To": number, "From": sender, "Body": message},
            auth=self._get_auth(),
        )
        data = self._json_object(response, "send_text")

        return MessageHandle(
            sid=data.get("sid") or "",
            status=data.get("status") or "queued",
            to=data.get("to") or number,
            from_number=data.get("from") or sender,
            body=data.get("body") or message,
            raw_response=data,
        )

    def purchase_number(self, number: str, friendly_name: str) -> PhoneNumberRecord:
        response = self._request(
            "POST",
            self._get_api_url("/IncomingPhoneNumbers.json"),
            operation="purchase_number",
            data={"PhoneNumber": number, "FriendlyName": friendly_name},
            auth=self._get_auth(),
        )
        return _phone_number_record(self._json_object(response, "purchase_number"))

    def list_incoming_numbers(self) -> list[PhoneNumberRecord]:
        records: list[PhoneNumberRecord] = []
        url: str | None = self._get_api_url("/IncomingPhoneNumbers.json")
        params: dict[str, Any] | None = {"PageSize": LIST_PAGE_SIZE}

        while url:
            response = self._request(
                "GET",
                url,
                operation="list_incoming_numbers",
                params=params,
                auth=self._get_auth(),
            )
            data = self._json_object(response, "list_incoming_numbers")
            records.extend(
                _phone_number_record(item)
                for item in _json_list(data, "incoming_phone_numbers")
            )

            # next_page_uri is host-relative and already carries the query.
            next_page_uri = data.get("next_page_uri")
            url = None
            if isinstance(next_page_uri, str) and next_page_uri:
                url = str(httpx.URL(self._config.twilio_api_base).join(next_page_uri))
            params = None

        logger.debug(
            "Listed Twilio incoming numbers",
            extra={"count": len(records), "account_sid": mask_secret(self._config.twilio_account_sid)},
        )
        return records

    def update_webhook_urls(self, sid: str, *, voice_url: str, sms_url: str) -> None:
        self._request(
            "POST",
            self._get_api_url(f"/IncomingPhoneNumbers/{sid}.json"),
            operation="update_webhook_urls",
            data={"VoiceUrl": voice_url, "SmsUrl": sms_url},
            auth=self._get_auth(),
        )

    def register_campaign_number(self, sid: str, campaign_sid: str) -> None:
        base = self._config.twilio_messaging_api_base.rstrip("/")
        self._request(
            "POST",
            f"{base}/Services/{campaign_sid}/PhoneNumbers",
            operation="register_campaign_number",
            data={"PhoneNumberSid": sid},
            auth=self._get_auth(),
        )

    def find_available_numbers(self, area_code: str) -> list[AvailableNumber]:
        country = self._config.country_code.upper()
        response = self._request(
            "GET",
            self._get_api_url(f"/AvailablePhoneNumbers/{country}/Local.json"),
            operation="find_available_numbers",
            params={"AreaCode": area_code, "PageSize": AVAILABLE_NUMBERS_LIMIT},
            auth=self._get_auth(),
        )
        items = _json_list(
            self._json_object(response, "find_available_numbers"),
            "available_phone_numbers",
        )

        return [
            AvailableNumber(
                number=item.get("friendly_name"),
                city=item.get("locality"),
                zip=item.get("postal_code"),
            )
            for item in items[:AVAILABLE_NUMBERS_LIMIT]
        ]

    def validate_webhook_signature(self, payload: bytes, signature: str, url: str) -> bool:
        if not self._config.twilio_auth_token:
            logger.warning("No auth token configured, skipping signature validation")
            return True

        try:
            params = parse_qs(payload.decode("utf-8"), keep_blank_values=True)

            data_str = url
            for key in sorted(params.keys()):
                data_str += key + params[key][0]

            computed = hmac.new(
                self._config.twilio_auth_token.encode("utf-8"),
                data_str.encode("utf-8"),
                hashlib.sha1,
            ).digest()

            computed_sig = b64encode(computed).decode("utf-8")
            return hmac.compare_digest(computed_sig, signature)

        except (UnicodeDecodeError, TypeError, ValueError):
            logger.exception("Error validating Twilio signature")
            return False


def _phone_number_record(item: dict[str, Any]) -> PhoneNumberRecord:
    return PhoneNumberRecord(
        sid=item.get("sid") or "",
        phone_number=item.get("phone_number") or "",
        friendly_name=item.get("friendly_name") or "",
        sms_url=item.get("sms_url"),
        voice_url=item.get("voice_url"),
    )


def _json_list(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    # Entries that are not objects are skipped.
    items = data.get(key)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]
