import logging

from flask import Flask
from flask_socketio import SocketIO, join_room, leave_room

from farmwatch.utils.emitters import SOCKETIO_NAMESPACE_NOTIFICATIONS

logger = logging.getLogger(__name__)

# Threading mode: deliveries already run on worker threads
socketio = SocketIO(async_mode="threading", cors_allowed_origins=[], logger=False, engineio_logger=False)


def init_extensions(app: Flask, cors_origins: str) -> None:
    """Initialise Flask extension objects."""
    origins = cors_origins if isinstance(cors_origins, str) else "*"
    socketio.init_app(app, cors_allowed_origins=origins)
    logger.info("Socket.IO initialized with CORS origins: %s", origins)


def _room_for(data: dict | None) -> str | None:
    user_id = (data or {}).get("userId")
    if user_id is None:
        return None
    return f"user_{int(user_id)}"


@socketio.on("subscribe", namespace=SOCKETIO_NAMESPACE_NOTIFICATIONS)
def _subscribe(data: dict | None = None) -> None:
    room = _room_for(data)
    if room:
        join_room(room)


@socketio.on("unsubscribe", namespace=SOCKETIO_NAMESPACE_NOTIFICATIONS)
def _unsubscribe(data: dict | None = None) -> None:
    room = _room_for(data)
    if room:
        leave_room(room)
