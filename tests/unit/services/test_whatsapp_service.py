from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from farmwatch.domain.exceptions import ConfigurationError, ExternalServiceError, ValidationError
from farmwatch.services.utilities.whatsapp_service import (
    WhatsAppConfig,
    WhatsAppMessage,
    WhatsAppService,
    format_whatsapp_address,
)

SENT_AT = datetime(2026, 1, 15, 12, 30, 5, tzinfo=timezone.utc)


def _response(status_code=201, body=None):
    response = MagicMock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.json.return_value = body if body is not None else {}
    response.text = ""
    response.reason = "Bad Request"
    return response


def _service(session):
    config = WhatsAppConfig(account_sid="AC123", auth_token="secret", timeout=3.0)
    return WhatsAppService(config, session=session)


def _message(phone="+237 6 99-00-11-22"):
    return WhatsAppMessage(
        to_phone=phone,
        title="🚨 Alerte : Seuil Dépassé",
        body="Le capteur temperature a enregistré une valeur (5) inférieure au seuil minimum (10)",
        sent_at=SENT_AT,
    )


@pytest.mark.parametrize(
    ("phone", "expected"),
    [
        ("+237 6 99 00 11 22", "whatsapp:+237699001122"),
        ("237699001122", "whatsapp:+237699001122"),
        ("whatsapp:+33612345678", "whatsapp:+33612345678"),
        ("(+1) 415-523-8886", "whatsapp:+14155238886"),
    ],
)
def test_format_whatsapp_address(phone, expected):
    assert format_whatsapp_address(phone) == expected


def test_format_whatsapp_address_rejects_empty():
    with pytest.raises(ValidationError):
        format_whatsapp_address("  - ")


def test_message_render():
    assert _message().render() == (
        "🚨 Alerte : Seuil Dépassé\n\n"
        "Le capteur temperature a enregistré une valeur (5) inférieure au seuil minimum (10)\n\n"
        "Date: 15/01/2026 12:30:05"
    )


def test_send_posts_to_twilio_messages_endpoint():
    session = MagicMock()
    session.post.return_value = _response(201, {"sid": "SM42"})

    sid = _service(session).send(_message())

    assert sid == "SM42"
    url = session.post.call_args.args[0]
    kwargs = session.post.call_args.kwargs
    assert url == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
    assert kwargs["auth"] == ("AC123", "secret")
    assert kwargs["timeout"] == 3.0
    assert kwargs["data"]["From"] == "whatsapp:+14155238886"
    assert kwargs["data"]["To"] == "whatsapp:+237699001122"
    assert kwargs["data"]["Body"].endswith("Date: 15/01/2026 12:30:05")


def test_send_raises_on_provider_rejection():
    session = MagicMock()
    session.post.return_value = _response(400, {"message": "Invalid 'To' Phone Number"})

    with pytest.raises(ExternalServiceError, match="Invalid 'To' Phone Number"):
        _service(session).send(_message())


def test_send_raises_on_transport_error():
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("network down")

    with pytest.raises(ExternalServiceError) as exc_info:
        _service(session).send(_message())

    assert exc_info.value.http_status == 502


def test_missing_credentials_are_a_configuration_error():
    with pytest.raises(ConfigurationError):
        WhatsAppService(WhatsAppConfig(account_sid="", auth_token=""))


def test_sender_without_prefix_is_formatted():
    config = WhatsAppConfig(account_sid="AC1", auth_token="t", from_number="+1 415 523 8886")
    assert config.sender == "whatsapp:+14155238886"
