from farmwatch.config import AppConfig
from farmwatch.domain.events import Event
from farmwatch.enums import EventType, NotificationChannel, NotificationStatus
from farmwatch.services.container import ServiceContainer
from farmwatch.utils.time import utc_now


def _config(tmp_path, **overrides):
    values = dict(
        database_path=str(tmp_path / "farmwatch.db"),
        audit_log_path=str(tmp_path / "logs" / "audit.log"),
        whatsapp_enabled=False,
    )
    values.update(overrides)
    return AppConfig(**values)


def test_build_wires_services(tmp_path):
    container = ServiceContainer.build(_config(tmp_path))
    try:
        assert container.whatsapp_service is None
        assert container.emitter is None
        assert container.threshold_service is not None
        assert container.liveness_sweeper.running is False
    finally:
        container.shutdown()


def test_build_with_whatsapp_enabled(tmp_path):
    container = ServiceContainer.build(
        _config(tmp_path, whatsapp_enabled=True, twilio_account_sid="AC123", twilio_auth_token="tok")
    )
    try:
        assert container.whatsapp_service is not None
        assert container.whatsapp_service.config.sender == "whatsapp:+14155238886"
    finally:
        container.shutdown()


def test_disabled_whatsapp_records_error_without_blocking_web(tmp_path):
    container = ServiceContainer.build(_config(tmp_path))
    try:
        db = container.database
        user_id = db.insert_user(phone="+237600000001", first_name="Awa")
        row = db.insert_event(str(EventType.MODE_CHANGED), "Le mode a changé")
        event = Event(
            id=row["event_id"],
            event_type=EventType.MODE_CHANGED,
            description="Le mode a changé",
            created_at=utc_now(),
        )

        container.notifications_service.process_event(event, [user_id])

        statuses = {n.channel: n.status for n in container.notification_repo.list_for_event(event.id)}
        assert statuses == {
            NotificationChannel.WEB: NotificationStatus.SENT,
            NotificationChannel.WHATSAPP: NotificationStatus.ERROR,
        }
    finally:
        container.shutdown()
