"""
Notification Channels
=====================

One handler per delivery mechanism. A handler always records the outcome on
the notification row before returning or raising, so the dispatcher never has
to touch the status of a notification whose channel was selected.

Email is reserved in storage but has no handler: selecting it is a
configuration error raised by :class:`ChannelFactory`.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from farmwatch.domain.events import Event
from farmwatch.domain.exceptions import FarmWatchError, NotFoundError, UnsupportedChannelError, ValidationError
from farmwatch.domain.notifications import Notification
from farmwatch.enums import NotificationChannel, NotificationStatus
from farmwatch.schemas.events import NotificationPayload
from farmwatch.services.utilities.whatsapp_service import WhatsAppMessage
from farmwatch.utils.time import to_iso

if TYPE_CHECKING:
    from farmwatch.services.utilities.whatsapp_service import WhatsAppService
    from farmwatch.utils.emitters import EmitterService
    from infrastructure.database.repositories.events import EventRepository
    from infrastructure.database.repositories.farm import FarmRepository
    from infrastructure.database.repositories.notifications import NotificationRepository
    from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)


class NotificationChannelHandler(ABC):
    """Delivers one notification and records SENT or ERROR on it."""

    channel: NotificationChannel

    def __init__(
        self,
        notification_repo: "NotificationRepository",
        audit_logger: "AuditLogger | None" = None,
    ):
        self._notifications = notification_repo
        self._audit = audit_logger

    @abstractmethod
    def deliver(self, notification: Notification) -> None:
        """
        Deliver ``notification``.

        Raises:
            FarmWatchError: delivery failed; the row is already marked ERROR.
        """

    def _mark_sent(self, notification: Notification) -> None:
        self._notifications.set_status(notification.id, NotificationStatus.SENT)
        logger.info("Notification %s sent via %s", notification.id, self.channel)
        if self._audit:
            self._audit.log_delivery(
                notification.id,
                str(self.channel),
                "sent",
                event_id=notification.event_id,
                user_id=notification.user_id,
            )

    def _mark_error(self, notification: Notification, exc: BaseException) -> None:
        message = str(exc) or exc.__class__.__name__
        self._notifications.set_status(notification.id, NotificationStatus.ERROR, error=message)
        logger.warning("Notification %s failed via %s: %s", notification.id, self.channel, message)
        if self._audit:
            self._audit.log_delivery(
                notification.id,
                str(self.channel),
                "error",
                event_id=notification.event_id,
                user_id=notification.user_id,
                error=message,
            )


class WebChannel(NotificationChannelHandler):
    """
    In-app channel.

    The row itself is what the web client lists, so storing SENT is the
    delivery. When an emitter is wired the notification is also pushed to the
    recipient's Socket.IO room; a failed push leaves the row SENT.
    """

    channel = NotificationChannel.WEB

    def __init__(
        self,
        notification_repo: "NotificationRepository",
        event_repo: "EventRepository | None" = None,
        emitter: "EmitterService | None" = None,
        audit_logger: "AuditLogger | None" = None,
    ):
        super().__init__(notification_repo, audit_logger)
        self._events = event_repo
        self._emitter = emitter

    def deliver(self, notification: Notification) -> None:
        self._mark_sent(notification)
        if self._emitter is not None and self._events is not None:
            self._push(notification)

    def _push(self, notification: Notification) -> None:
        try:
            event = self._events.get(notification.event_id)
        except FarmWatchError as e:
            logger.warning("Skipping live push for notification %s: %s", notification.id, e)
            return
        if event is None:
            return

        payload = NotificationPayload(
            userId=notification.user_id,
            notificationId=notification.id,
            eventId=event.id,
            eventType=event.event_type.value,
            title=event.label,
            message=event.description,
            channel=self.channel.value,
            sensorId=event.sensor_id,
            actuatorId=event.actuator_id,
            timestamp=to_iso(event.created_at),
        )
        if not self._emitter.emit_notification(payload):
            logger.warning("Live push failed for notification %s; row stays sent", notification.id)


class WhatsAppChannel(NotificationChannelHandler):
    """Sends the event label, description and date to the recipient's phone."""

    channel = NotificationChannel.WHATSAPP

    def __init__(
        self,
        notification_repo: "NotificationRepository",
        event_repo: "EventRepository",
        farm_repo: "FarmRepository",
        whatsapp_service: "WhatsAppService",
        audit_logger: "AuditLogger | None" = None,
    ):
        super().__init__(notification_repo, audit_logger)
        self._events = event_repo
        self._farm = farm_repo
        self._whatsapp = whatsapp_service

    def deliver(self, notification: Notification) -> None:
        try:
            message = self._build_message(notification)
            self._whatsapp.send(message)
        except Exception as exc:
            self._mark_error(notification, exc)
            raise
        self._mark_sent(notification)

    def _build_message(self, notification: Notification) -> WhatsAppMessage:
        event: Event | None = self._events.get(notification.event_id)
        if event is None:
            raise NotFoundError(
                f"Event {notification.event_id} not found",
                detail={"notification_id": notification.id},
            )

        user = self._farm.get_user(notification.user_id)
        if user is None:
            raise NotFoundError(
                f"User {notification.user_id} not found",
                detail={"notification_id": notification.id},
            )
        if not user.has_phone:
            raise ValidationError(
                f"User {user.id} has no phone number",
                detail={"notification_id": notification.id},
            )

        return WhatsAppMessage(
            to_phone=user.phone,
            title=event.label,
            body=event.description,
            sent_at=event.created_at,
        )


class ChannelFactory:
    """
    Selects the handler for a notification channel.

    Handlers are stateless apart from their collaborators, so one instance per
    channel is built lazily and shared across dispatches.
    """

    def __init__(
        self,
        notification_repo: "NotificationRepository",
        event_repo: "EventRepository",
        farm_repo: "FarmRepository",
        whatsapp_service: "WhatsAppService | None" = None,
        emitter: "EmitterService | None" = None,
        audit_logger: "AuditLogger | None" = None,
    ):
        self._notifications = notification_repo
        self._events = event_repo
        self._farm = farm_repo
        self._whatsapp = whatsapp_service
        self._emitter = emitter
        self._audit = audit_logger
        self._handlers: dict[NotificationChannel, NotificationChannelHandler] = {}
        self._lock = threading.Lock()

    def create(self, channel: NotificationChannel | str) -> NotificationChannelHandler:
        """
        Return the handler for ``channel``.

        Raises:
            UnsupportedChannelError: email, an unknown channel, or WhatsApp
                without a configured provider.
        """
        try:
            channel = NotificationChannel(channel)
        except ValueError as e:
            raise UnsupportedChannelError(f"Unknown notification channel: {channel!r}") from e

        with self._lock:
            handler = self._handlers.get(channel)
            if handler is None:
                handler = self._build(channel)
                self._handlers[channel] = handler
            return handler

    def _build(self, channel: NotificationChannel) -> NotificationChannelHandler:
        if channel == NotificationChannel.WEB:
            return WebChannel(self._notifications, self._events, self._emitter, self._audit)

        if channel == NotificationChannel.WHATSAPP:
            if self._whatsapp is None:
                raise UnsupportedChannelError(
                    "WhatsApp channel selected but no WhatsApp provider is configured",
                    detail={"channel": channel.value},
                )
            return WhatsAppChannel(self._notifications, self._events, self._farm, self._whatsapp, self._audit)

        if channel == NotificationChannel.EMAIL:
            raise UnsupportedChannelError(
                "Email notifications are disabled",
                detail={"channel": channel.value},
            )

        raise UnsupportedChannelError(f"No handler for channel {channel.value}")
