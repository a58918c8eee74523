from enum import Enum


class EventType(str, Enum):
    """Domain events that fan out as notifications."""

    THRESHOLD_EXCEEDED = "threshold_exceeded"
    THRESHOLD_CHANGED = "threshold_changed"
    ACTUATOR_ACTIVATED = "actuator_activated"
    ACTUATOR_DEACTIVATED = "actuator_deactivated"
    MODE_CHANGED = "mode_changed"
    SENSOR_ACTIVE = "sensor_active"
    SENSOR_INACTIVE = "sensor_inactive"

    @property
    def label(self) -> str:
        """Human readable title used in outgoing messages."""
        return EVENT_TYPE_LABELS.get(self, f"Notification : {self.value}")

    def __str__(self) -> str:
        return self.value


EVENT_TYPE_LABELS = {
    EventType.THRESHOLD_EXCEEDED: "🚨 Alerte : Seuil Dépassé",
    EventType.THRESHOLD_CHANGED: "⚙️ Seuils Modifiés",
    EventType.ACTUATOR_ACTIVATED: "✅ Actionneur Activé",
    EventType.ACTUATOR_DEACTIVATED: "⏸️ Actionneur Désactivé",
    EventType.MODE_CHANGED: "🔄 Changement de Mode",
    EventType.SENSOR_ACTIVE: "✅ Capteur Actif",
    EventType.SENSOR_INACTIVE: "⚠️ Capteur Inactif",
}


class WebSocketEvent(str, Enum):
    """WebSocket event names for real-time communication."""

    NOTIFICATION = "notification"
    NOTIFICATION_STATS = "notification_stats"

    def __str__(self) -> str:
        return self.value
