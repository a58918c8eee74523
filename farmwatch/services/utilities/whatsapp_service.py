"""
WhatsApp Service
================

Sends WhatsApp messages through the Twilio Messages REST endpoint.

Delivery only: callers decide what a failure means for their records. Every
failure surfaces as :class:`ExternalServiceError`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime

import requests

from farmwatch.domain.exceptions import ConfigurationError, ExternalServiceError, ValidationError
from farmwatch.utils.time import format_datetime

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"
TWILIO_SANDBOX_NUMBER = "whatsapp:+14155238886"
WHATSAPP_PREFIX = "whatsapp:"

_NON_DIGITS = re.compile(r"\D")


def format_whatsapp_address(phone: str) -> str:
    """
    Normalise a phone number to ``whatsapp:+<digits>``.

    Spaces, dashes, dots and parentheses are dropped. Raises ValidationError
    when nothing dialable remains.
    """
    raw = (phone or "").strip()
    if raw.startswith(WHATSAPP_PREFIX):
        raw = raw[len(WHATSAPP_PREFIX):]
    digits = _NON_DIGITS.sub("", raw)
    if not digits:
        raise ValidationError("Phone number has no digits", detail={"phone": phone})
    return f"{WHATSAPP_PREFIX}+{digits}"


@dataclass
class WhatsAppConfig:
    """Twilio account used to send WhatsApp messages."""

    account_sid: str
    auth_token: str
    from_number: str = TWILIO_SANDBOX_NUMBER
    timeout: float = 10.0
    api_base: str = TWILIO_API_BASE

    @property
    def sender(self) -> str:
        if self.from_number.startswith(WHATSAPP_PREFIX):
            return self.from_number
        return format_whatsapp_address(self.from_number)

    @property
    def messages_url(self) -> str:
        return f"{self.api_base}/Accounts/{self.account_sid}/Messages.json"


@dataclass
class WhatsAppMessage:
    """Represents an outgoing WhatsApp text."""

    to_phone: str
    title: str
    body: str
    sent_at: datetime

    def render(self) -> str:
        """Title, blank line, body, blank line, French-formatted date."""
        return f"{self.title}\n\n{self.body}\n\nDate: {format_datetime(self.sent_at)}"


class WhatsAppService:
    """
    WhatsApp sending service.

    Wraps a ``requests.Session`` so tests can swap the transport.
    """

    def __init__(self, config: WhatsAppConfig, session: requests.Session | None = None):
        if not config.account_sid or not config.auth_token:
            raise ConfigurationError("Twilio credentials are required for WhatsApp delivery")
        self._config = config
        self._session = session or requests.Session()

    @property
    def config(self) -> WhatsAppConfig:
        return self._config

    def send(self, message: WhatsAppMessage) -> str | None:
        """
        Send a WhatsApp message.

        Args:
            message: The message to send.

        Returns:
            The provider message SID when one is returned.

        Raises:
            ValidationError: The recipient phone cannot be formatted.
            ExternalServiceError: Transport failure or a non-2xx answer.
        """
        to_address = format_whatsapp_address(message.to_phone)
        data = {
            "From": self._config.sender,
            "To": to_address,
            "Body": message.render(),
        }

        try:
            response = self._session.post(
                self._config.messages_url,
                data=data,
                auth=(self._config.account_sid, self._config.auth_token),
                timeout=self._config.timeout,
            )
        except requests.RequestException as e:
            logger.error("WhatsApp request to %s failed: %s", to_address, e)
            raise ExternalServiceError(f"WhatsApp request failed: {e}", detail={"to": to_address}) from e

        if not response.ok:
            reason = _error_message(response)
            logger.error("WhatsApp provider rejected message to %s (%s): %s", to_address, response.status_code, reason)
            raise ExternalServiceError(
                f"WhatsApp provider returned {response.status_code}: {reason}",
                detail={"to": to_address, "status_code": response.status_code},
            )

        sid = _message_sid(response)
        logger.info("WhatsApp message sent to %s (sid=%s)", to_address, sid)
        return sid

    def close(self) -> None:
        self._session.close()


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or "unknown error"
    if isinstance(body, dict):
        return str(body.get("message") or body)
    return str(body)


def _message_sid(response: requests.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("sid") if isinstance(body, dict) else None
