"""
Notification Service
====================

Fans an event out to its recipients and tracks what they have read.

Dispatch:
- one WEB notification per recipient, plus one WHATSAPP notification for
  every recipient with a phone number;
- every row is stored PENDING in a single transaction before any delivery;
- each row is then delivered on its own worker; a failing delivery is logged
  and never stops the others.

Read tracking (web client): list, fetch, mark read, counters, delete.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING, Iterable

from farmwatch.domain.events import Event
from farmwatch.domain.exceptions import ConfigurationError, ConflictError, NotFoundError, ValidationError
from farmwatch.domain.notifications import READABLE_CHANNELS, Notification, NotificationStats
from farmwatch.enums import NotificationChannel, NotificationStatus
from farmwatch.schemas.events import NotificationStatsPayload

if TYPE_CHECKING:
    from farmwatch.services.application.notification_channels import ChannelFactory
    from farmwatch.utils.emitters import EmitterService
    from infrastructure.database.repositories.farm import FarmRepository
    from infrastructure.database.repositories.notifications import NotificationRepository
    from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4
DEFAULT_DELIVERY_TIMEOUT = 10.0


class NotificationsService:
    """
    Notification dispatcher and read-state service.

    The dispatcher never retries and never rewrites a status set by a
    channel. The only status it writes itself is ERROR for a row whose
    channel cannot be selected.
    """

    def __init__(
        self,
        notification_repo: "NotificationRepository",
        farm_repo: "FarmRepository",
        channel_factory: "ChannelFactory",
        emitter_service: "EmitterService | None" = None,
        audit_logger: "AuditLogger | None" = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        delivery_timeout: float | None = DEFAULT_DELIVERY_TIMEOUT,
    ):
        """
        Initialize NotificationsService.

        Args:
            notification_repo: Repository for notification rows.
            farm_repo: Repository used to resolve recipients.
            channel_factory: Selects the handler for each row.
            emitter_service: Optional emitter for counter refreshes.
            audit_logger: Optional audit trail for dispatcher-written outcomes.
            max_workers: Upper bound on concurrent deliveries per event.
            delivery_timeout: Seconds to wait for deliveries; None waits forever.
        """
        self._repo = notification_repo
        self._farm = farm_repo
        self._channels = channel_factory
        self._emitter = emitter_service
        self._audit = audit_logger
        self._max_workers = max(1, max_workers)
        self._delivery_timeout = delivery_timeout

    # --- Dispatch ---

    def process_event(self, event: Event, recipient_user_ids: Iterable[int]) -> None:
        """
        Create and deliver the notifications of ``event``.

        Unknown user ids are ignored. Returns once every delivery finished or
        the delivery timeout elapsed; rows still running at that point stay
        PENDING. Persistence errors while creating the rows propagate.
        """
        users = self._farm.get_users(recipient_user_ids)
        targets: list[tuple[int, NotificationChannel]] = []
        for user in users:
            targets.append((user.id, NotificationChannel.WEB))
            if user.has_phone:
                targets.append((user.id, NotificationChannel.WHATSAPP))

        if not targets:
            logger.info("Event %s has no known recipients; nothing to dispatch", event.id)
            return

        notifications = self._repo.create_pending(event.id, targets)
        logger.info(
            "Dispatching event %s: %s notification(s) for %s recipient(s)",
            event.id,
            len(notifications),
            len(users),
        )
        self._deliver_all(event, notifications)

    def _deliver_all(self, event: Event, notifications: list[Notification]) -> None:
        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(notifications)),
            thread_name_prefix=f"dispatch_event_{event.id}",
        )
        try:
            future_to_notification: dict[Future, Notification] = {
                executor.submit(self._deliver_one, notification): notification
                for notification in notifications
            }
            done, not_done = wait(future_to_notification, timeout=self._delivery_timeout)

            for future in done:
                notification = future_to_notification[future]
                try:
                    future.result()
                except Exception as e:
                    logger.error(
                        "Delivery of notification %s (%s) for event %s failed: %s",
                        notification.id,
                        notification.channel,
                        event.id,
                        e,
                    )

            for future in not_done:
                notification = future_to_notification[future]
                logger.warning(
                    "Delivery of notification %s (%s) for event %s still running after %ss; left pending",
                    notification.id,
                    notification.channel,
                    event.id,
                    self._delivery_timeout,
                )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _deliver_one(self, notification: Notification) -> None:
        try:
            handler = self._channels.create(notification.channel)
        except ConfigurationError as e:
            self._repo.set_status(notification.id, NotificationStatus.ERROR, error=str(e))
            if self._audit:
                self._audit.log_delivery(
                    notification.id,
                    str(notification.channel),
                    "error",
                    event_id=notification.event_id,
                    user_id=notification.user_id,
                    error=str(e),
                )
            raise
        handler.deliver(notification)

    # --- Read tracking ---

    def get_user_notifications(
        self,
        user_id: int,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Notification]:
        """Newest first."""
        if limit <= 0:
            raise ValidationError("limit must be positive", detail={"limit": limit})
        return self._repo.list_for_user(user_id, unread_only=unread_only, limit=limit, offset=offset)

    def get_notification(self, user_id: int, notification_id: int) -> Notification:
        """Fetch one of the user's notifications; someone else's reads as missing."""
        notification = self._repo.get(notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundError(
                f"Notification {notification_id} not found",
                detail={"notification_id": notification_id, "user_id": user_id},
            )
        return notification

    def mark_read(self, user_id: int, notification_id: int) -> Notification:
        """
        Mark a delivered web/email notification as read.

        Already-read notifications are returned unchanged.

        Raises:
            NotFoundError: unknown id or another user's notification.
            ValidationError: the channel carries no read state.
            ConflictError: the notification was not delivered.
        """
        notification = self.get_notification(user_id, notification_id)
        if notification.channel not in READABLE_CHANNELS:
            raise ValidationError(
                f"{notification.channel.value} notifications cannot be marked as read",
                detail={"notification_id": notification_id},
            )
        if notification.is_read:
            return notification
        if notification.status != NotificationStatus.SENT:
            raise ConflictError(
                f"Notification {notification_id} is {notification.status.value}, not sent",
                detail={"notification_id": notification_id},
            )

        self._repo.mark_read(notification_id)
        self._push_stats(user_id)
        return self.get_notification(user_id, notification_id)

    def mark_all_read(self, user_id: int) -> int:
        """Mark every delivered web/email notification of the user as read."""
        count = self._repo.mark_all_read(user_id)
        if count:
            logger.info("Marked %s notification(s) read for user %s", count, user_id)
            self._push_stats(user_id)
        return count

    def get_stats(self, user_id: int) -> NotificationStats:
        return self._repo.get_stats(user_id)

    def delete_notification(self, user_id: int, notification_id: int) -> bool:
        self.get_notification(user_id, notification_id)
        deleted = self._repo.delete(notification_id)
        if deleted:
            self._push_stats(user_id)
        return deleted

    def _push_stats(self, user_id: int) -> None:
        if self._emitter is None:
            return
        stats = self._repo.get_stats(user_id)
        self._emitter.emit_notification_stats(NotificationStatsPayload(userId=user_id, **stats.to_dict()))
