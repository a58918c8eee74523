"""
Shared test fixtures for the FarmWatch test suite.

Provides:
- File-backed SQLite database (tmp_path) with all tables created
- Repository instances wired to the test database
- A fake WhatsApp provider recording what would have been sent
- Service factories for the dispatcher and the orchestrator
- Helper utilities for seeding test data

Usage:
    def test_example(seed, threshold_service):
        sensor_id = seed.create_sensor(plantation_id, min_threshold=10)
        ...

A file database is used rather than ``:memory:`` because deliveries run on
worker threads, each with its own connection.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

# Ensure repository root is on sys.path so tests can import application modules
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from farmwatch.domain.exceptions import ExternalServiceError
from farmwatch.enums import ActuatorStatus, PlantationMode, SensorStatus, SensorType
from farmwatch.services.application.event_service import EventService
from farmwatch.services.application.farm_activity_service import FarmActivityService
from farmwatch.services.application.notification_channels import ChannelFactory
from farmwatch.services.application.notifications_service import NotificationsService
from farmwatch.services.application.threshold_service import ThresholdService
from farmwatch.services.utilities.whatsapp_service import WhatsAppMessage, format_whatsapp_address
from farmwatch.utils.time import to_iso
from infrastructure.database.repositories.devices import DeviceRepository
from infrastructure.database.repositories.events import EventRepository
from infrastructure.database.repositories.farm import FarmRepository
from infrastructure.database.repositories.notifications import NotificationRepository
from infrastructure.database.sqlite_handler import SQLiteDatabaseHandler

# ---------------------------------------------------------------------------
# Logging: keep test output clean
# ---------------------------------------------------------------------------
logging.getLogger("infrastructure").setLevel(logging.WARNING)
logging.getLogger("farmwatch").setLevel(logging.WARNING)

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# ========================== Database Fixtures ==============================


@pytest.fixture()
def db_handler(tmp_path):
    """SQLite database in tmp_path with all tables created.

    Each test gets a fresh database: no cross-test contamination.
    """
    handler = SQLiteDatabaseHandler(str(tmp_path / "farmwatch_test.db"))
    handler.create_tables()
    yield handler
    handler.close()


@pytest.fixture()
def db_connection(db_handler):
    """Raw sqlite3 connection for direct SQL in tests."""
    with db_handler.connection() as conn:
        yield conn


# ========================== Repository Fixtures ============================


@pytest.fixture()
def device_repo(db_handler):
    return DeviceRepository(db_handler)


@pytest.fixture()
def farm_repo(db_handler):
    return FarmRepository(db_handler)


@pytest.fixture()
def event_repo(db_handler):
    return EventRepository(db_handler)


@pytest.fixture()
def notification_repo(db_handler):
    return NotificationRepository(db_handler)


# ========================== Provider Fakes =================================


class FakeWhatsAppService:
    """Stands in for WhatsAppService; records messages instead of calling Twilio."""

    def __init__(self) -> None:
        self.sent: list[WhatsAppMessage] = []
        self.failing_phones: set[str] = set()

    def fail_for(self, phone: str) -> None:
        self.failing_phones.add(format_whatsapp_address(phone))

    def send(self, message: WhatsAppMessage) -> str:
        address = format_whatsapp_address(message.to_phone)
        if address in self.failing_phones:
            raise ExternalServiceError(f"Provider rejected {address}")
        self.sent.append(message)
        return f"SM{len(self.sent):04d}"

    def close(self) -> None:
        pass


@pytest.fixture()
def fake_whatsapp():
    return FakeWhatsAppService()


@pytest.fixture()
def mock_audit_logger():
    return MagicMock()


@pytest.fixture()
def mock_emitter():
    emitter = MagicMock()
    emitter.emit_notification.return_value = True
    return emitter


# ========================== Service Fixtures ===============================


@pytest.fixture()
def channel_factory(notification_repo, event_repo, farm_repo, fake_whatsapp, mock_audit_logger):
    return ChannelFactory(
        notification_repo=notification_repo,
        event_repo=event_repo,
        farm_repo=farm_repo,
        whatsapp_service=fake_whatsapp,
        audit_logger=mock_audit_logger,
    )


@pytest.fixture()
def event_service(event_repo):
    return EventService(event_repo)


@pytest.fixture()
def notifications_service(notification_repo, farm_repo, channel_factory, mock_audit_logger):
    return NotificationsService(
        notification_repo=notification_repo,
        farm_repo=farm_repo,
        channel_factory=channel_factory,
        audit_logger=mock_audit_logger,
        max_workers=4,
        delivery_timeout=10.0,
    )


@pytest.fixture()
def threshold_service(device_repo, farm_repo, event_service, notifications_service):
    return ThresholdService(
        device_repo=device_repo,
        farm_repo=farm_repo,
        event_service=event_service,
        notifications_service=notifications_service,
        staleness_window=timedelta(hours=1),
        clock=lambda: NOW,
    )


@pytest.fixture()
def farm_activity_service(farm_repo, event_service, notifications_service):
    return FarmActivityService(
        farm_repo=farm_repo,
        event_service=event_service,
        notifications_service=notifications_service,
    )


# ========================== Seed Helpers ===================================


class SeedData:
    """Helper to create commonly needed test data.

    Usage in tests::

        def test_something(seed):
            owner_id = seed.create_user(phone="+237 6 99 00 11 22")
            plantation_id = seed.create_plantation(owner_id, name="Champ Nord")
            sensor_id = seed.create_sensor(plantation_id, min_threshold=10, max_threshold=30)
            seed.insert_reading(sensor_id, 22.5, NOW)
    """

    def __init__(self, db_handler: SQLiteDatabaseHandler):
        self._db = db_handler

    def create_user(self, phone: str | None = None, first_name: str = "Pauline", email: str | None = None) -> int:
        return self._db.insert_user(phone=phone, email=email, first_name=first_name)

    def create_plantation(
        self,
        owner_id: int,
        name: str = "Champ Test",
        mode: PlantationMode = PlantationMode.AUTOMATIC,
    ) -> int:
        return self._db.insert_plantation(owner_id=owner_id, name=name, location="Yaoundé", crop_type="manioc", mode=str(mode))

    def create_sensor(
        self,
        plantation_id: int,
        sensor_type: SensorType = SensorType.TEMPERATURE,
        status: SensorStatus = SensorStatus.ACTIVE,
        min_threshold: float | None = None,
        max_threshold: float | None = None,
    ) -> int:
        return self._db.insert_sensor(
            plantation_id=plantation_id,
            sensor_type=str(sensor_type),
            status=str(status),
            min_threshold=min_threshold,
            max_threshold=max_threshold,
        )

    def create_actuator(
        self,
        plantation_id: int,
        name: str = "Pompe principale",
        status: ActuatorStatus = ActuatorStatus.INACTIVE,
    ) -> int:
        return self._db.insert_actuator(
            plantation_id=plantation_id,
            name=name,
            actuator_type="water_pump",
            status=str(status),
        )

    def insert_reading(self, sensor_id: int, value: float, timestamp: datetime) -> int:
        return self._db.insert_sensor_reading(sensor_id, value, to_iso(timestamp))


@pytest.fixture()
def seed(db_handler):
    """SeedData helper for quickly populating the test database."""
    return SeedData(db_handler)
