"""
WebSocket Emitters
==================

Centralized Socket.IO emitter used by the Web notification channel.

Every user joins the room ``user_<id>`` on the ``/notifications`` namespace;
notifications and counter refreshes are pushed there.
"""

import logging

from flask_socketio import SocketIO

from farmwatch.enums.events import WebSocketEvent
from farmwatch.schemas.events import NotificationPayload, NotificationStatsPayload

logger = logging.getLogger("emitters")

SOCKETIO_NAMESPACE_NOTIFICATIONS = "/notifications"


class EmitterService:
    """
    Centralized WebSocket Emitter Service.

    Attributes:
        sio: The Socket.IO SocketIO instance for emitting events.
    """

    def __init__(self, sio: SocketIO):
        self.sio = sio

    def emit(
        self,
        event: str,
        payload: dict,
        room: str | None = None,
        namespace: str = "/",
    ) -> bool:
        """
        Emit a Socket.IO event.

        Args:
            event (str): Event name (e.g., "notification").
            payload (dict): JSON serializable data to send.
            room (Optional[str]): Socket.IO room identifier. Broadcasts if None.
            namespace (str): Socket.IO namespace to emit under (default "/").

        Returns:
            True when the server accepted the emit.
        """
        try:
            self.sio.emit(event, payload, to=room, namespace=namespace)
        except Exception as e:
            logger.exception("[Emitter] Failed to emit event '%s' to room '%s': %s", event, room, e)
            return False
        logger.debug("[Emitter] event='%s' namespace='%s' room='%s'", event, namespace, room or "broadcast")
        return True

    def emit_to_user(
        self,
        user_id: int,
        event: str,
        payload: dict,
        namespace: str = "/",
    ) -> bool:
        """Emit an event to the room 'user_<user_id>'."""
        return self.emit(event=event, payload=payload, room=f"user_{user_id}", namespace=namespace)

    def emit_notification(self, notification: NotificationPayload) -> bool:
        """
        Emit a notification event to a user.

        Args:
            notification (NotificationPayload): Validated notification data.
        """
        delivered = self.emit_to_user(
            user_id=notification.userId,
            event=notification.event,
            payload=notification.model_dump(),
            namespace=SOCKETIO_NAMESPACE_NOTIFICATIONS,
        )
        if delivered:
            logger.info("[Emitter] Notification %s emitted to user_%s", notification.notificationId, notification.userId)
        return delivered

    def emit_notification_stats(self, stats: NotificationStatsPayload) -> bool:
        return self.emit_to_user(
            user_id=stats.userId,
            event=WebSocketEvent.NOTIFICATION_STATS.value,
            payload=stats.model_dump(),
            namespace=SOCKETIO_NAMESPACE_NOTIFICATIONS,
        )
