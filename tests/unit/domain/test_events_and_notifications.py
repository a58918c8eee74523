from farmwatch.domain.events import Event
from farmwatch.domain.farm import User
from farmwatch.domain.notifications import Notification
from farmwatch.enums import EventType, NotificationChannel, NotificationStatus


def test_event_from_row_and_label():
    event = Event.from_row(
        {
            "event_id": 4,
            "event_type": "threshold_exceeded",
            "description": "desc",
            "created_at": "2026-01-15T12:00:00+00:00",
            "sensor_id": 9,
            "actuator_id": None,
        }
    )

    assert event.event_type == EventType.THRESHOLD_EXCEEDED
    assert event.label == "🚨 Alerte : Seuil Dépassé"
    assert event.to_dict()["type"] == "threshold_exceeded"
    assert event.created_at.tzinfo is not None


def test_notification_from_row():
    notification = Notification.from_row(
        {
            "notification_id": 1,
            "channel": "whatsapp",
            "status": "error",
            "event_id": 2,
            "user_id": 3,
            "sent_at": "2026-01-15T12:00:00+00:00",
            "is_read": 0,
            "read_at": None,
            "error": "boom",
        }
    )

    assert notification.channel == NotificationChannel.WHATSAPP
    assert notification.status == NotificationStatus.ERROR
    assert notification.is_terminal
    assert notification.is_read is False
    assert notification.to_dict()["error"] == "boom"


def test_user_phone_must_be_non_blank():
    assert User(id=1, phone="+237600000000").has_phone
    assert not User(id=1, phone="   ").has_phone
    assert not User(id=1, phone=None).has_phone
