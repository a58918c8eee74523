from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from flask_socketio import SocketIO

from farmwatch.config import AppConfig
from farmwatch.services.application.event_service import EventService
from farmwatch.services.application.farm_activity_service import FarmActivityService
from farmwatch.services.application.notification_channels import ChannelFactory
from farmwatch.services.application.notifications_service import NotificationsService
from farmwatch.services.application.threshold_service import ThresholdService
from farmwatch.services.utilities.whatsapp_service import WhatsAppConfig, WhatsAppService
from farmwatch.utils.emitters import EmitterService
from farmwatch.workers.liveness_sweeper import LivenessSweeper
from infrastructure.database.repositories.devices import DeviceRepository
from infrastructure.database.repositories.events import EventRepository
from infrastructure.database.repositories.farm import FarmRepository
from infrastructure.database.repositories.notifications import NotificationRepository
from infrastructure.database.sqlite_handler import SQLiteDatabaseHandler
from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Aggregate and manage core backend services."""

    config: AppConfig
    database: SQLiteDatabaseHandler
    device_repo: DeviceRepository
    farm_repo: FarmRepository
    event_repo: EventRepository
    notification_repo: NotificationRepository
    audit_logger: AuditLogger
    emitter: Optional[EmitterService]
    whatsapp_service: Optional[WhatsAppService]
    channel_factory: ChannelFactory
    event_service: EventService
    notifications_service: NotificationsService
    threshold_service: ThresholdService
    farm_activity_service: FarmActivityService
    liveness_sweeper: LivenessSweeper

    @classmethod
    def build(cls, config: AppConfig, *, socketio: SocketIO | None = None) -> "ServiceContainer":
        """Construct the service container with all dependencies.

        Args:
            config: Application configuration
            socketio: Socket.IO server used for live pushes, if any
        """
        logger.info("Building ServiceContainer...")
        database = SQLiteDatabaseHandler(config.database_path)
        database.create_tables()

        device_repo = DeviceRepository(database)
        farm_repo = FarmRepository(database)
        event_repo = EventRepository(database)
        notification_repo = NotificationRepository(database)
        audit_logger = AuditLogger(config.audit_log_path, config.log_level)

        emitter = EmitterService(socketio) if socketio is not None else None

        whatsapp_service = None
        if config.whatsapp_enabled:
            whatsapp_service = WhatsAppService(
                WhatsAppConfig(
                    account_sid=config.twilio_account_sid,
                    auth_token=config.twilio_auth_token,
                    from_number=config.twilio_whatsapp_number,
                    timeout=config.whatsapp_timeout_seconds,
                )
            )
            logger.info("WhatsApp channel enabled (from %s)", whatsapp_service.config.sender)
        else:
            logger.info("WhatsApp channel disabled; WhatsApp notifications will be recorded as errors")

        channel_factory = ChannelFactory(
            notification_repo=notification_repo,
            event_repo=event_repo,
            farm_repo=farm_repo,
            whatsapp_service=whatsapp_service,
            emitter=emitter,
            audit_logger=audit_logger,
        )
        event_service = EventService(event_repo)
        notifications_service = NotificationsService(
            notification_repo=notification_repo,
            farm_repo=farm_repo,
            channel_factory=channel_factory,
            emitter_service=emitter,
            audit_logger=audit_logger,
            max_workers=config.dispatch_max_workers,
            delivery_timeout=config.delivery_timeout_seconds,
        )
        threshold_service = ThresholdService(
            device_repo=device_repo,
            farm_repo=farm_repo,
            event_service=event_service,
            notifications_service=notifications_service,
            staleness_window=config.staleness_window,
        )
        farm_activity_service = FarmActivityService(
            farm_repo=farm_repo,
            event_service=event_service,
            notifications_service=notifications_service,
        )
        liveness_sweeper = LivenessSweeper(threshold_service, config.liveness_sweep_interval_seconds)

        logger.info("ServiceContainer built successfully.")
        return cls(
            config=config,
            database=database,
            device_repo=device_repo,
            farm_repo=farm_repo,
            event_repo=event_repo,
            notification_repo=notification_repo,
            audit_logger=audit_logger,
            emitter=emitter,
            whatsapp_service=whatsapp_service,
            channel_factory=channel_factory,
            event_service=event_service,
            notifications_service=notifications_service,
            threshold_service=threshold_service,
            farm_activity_service=farm_activity_service,
            liveness_sweeper=liveness_sweeper,
        )

    def shutdown(self) -> None:
        """Release external resources before process exit."""
        self.liveness_sweeper.stop()
        if self.whatsapp_service is not None:
            self.whatsapp_service.close()
        self.database.close()
        logger.info("ServiceContainer shut down.")
