import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from flask import Flask

from infrastructure.database.ops.devices import DeviceOperations
from infrastructure.database.ops.events import EventOperations
from infrastructure.database.ops.farm import FarmOperations
from infrastructure.database.ops.notifications import NotificationOperations

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


class SQLiteDatabaseHandler(
    FarmOperations,
    DeviceOperations,
    EventOperations,
    NotificationOperations,
):
    """Thread-safe SQLite handler decoupled from Flask globals.

    File databases get one connection per thread. An in-memory database only
    exists inside the connection that created it, so every thread shares a
    single connection in that case.
    """

    def __init__(self, database_path: str) -> None:
        self._database_path = database_path
        self._local = threading.local()
        self._shared_connection: Optional[sqlite3.Connection] = None
        self._shared_lock = threading.Lock()

        if database_path != MEMORY_DATABASE:
            db_path = Path(database_path)
            if not db_path.parent.exists():
                db_path.parent.mkdir(parents=True, exist_ok=True)
                logger.info("Created database directory: %s", db_path.parent)

    @property
    def database_path(self) -> str:
        return self._database_path

    # --- Lifecycle ------------------------------------------------------------
    def init_app(self, app: Flask | None = None) -> None:
        if app is not None:
            app.teardown_appcontext(self.close_db)
            app.extensions["farmwatch_db"] = self
        self.create_tables()

    def get_db(self) -> sqlite3.Connection:
        if self._database_path == MEMORY_DATABASE:
            with self._shared_lock:
                if self._shared_connection is None:
                    self._shared_connection = self._open_connection()
                return self._shared_connection

        connection: Optional[sqlite3.Connection] = getattr(self._local, "connection", None)
        if connection is None:
            connection = self._open_connection()
            self._local.connection = connection
        return connection

    def _open_connection(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._database_path, check_same_thread=False, timeout=10.0)
        try:
            connection.row_factory = sqlite3.Row
            self._configure_connection(connection)
            return connection
        except Exception:
            connection.close()
            raise

    def _configure_connection(self, connection: sqlite3.Connection) -> None:
        """WAL for concurrent readers during dispatch; foreign keys for cascades."""
        connection.execute("PRAGMA foreign_keys=ON")
        connection.execute("PRAGMA journal_mode=WAL")
        connection.execute("PRAGMA synchronous=NORMAL")
        connection.execute("PRAGMA temp_store=MEMORY")
        connection.commit()

    def close_db(self, _e: Optional[BaseException] = None) -> None:
        connection: Optional[sqlite3.Connection] = getattr(self._local, "connection", None)
        if connection is not None:
            connection.close()
            delattr(self._local, "connection")

    def close(self) -> None:
        """Close the calling thread's connection and the shared one, if any."""
        self.close_db()
        with self._shared_lock:
            if self._shared_connection is not None:
                self._shared_connection.close()
                self._shared_connection = None

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        conn = self.get_db()
        try:
            yield conn
        finally:
            conn.commit()

    # --- Schema ----------------------------------------------------------------
    def create_tables(self) -> None:
        """Creates the necessary tables in the database if they do not already exist."""
        with self.connection() as db:
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT,
                    phone TEXT,
                    first_name TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Plantations (
                    plantation_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id INTEGER,
                    name TEXT NOT NULL,
                    location TEXT,
                    crop_type TEXT,
                    mode TEXT NOT NULL DEFAULT 'automatic',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP,
                    FOREIGN KEY (owner_id) REFERENCES Users(id) ON DELETE SET NULL
                )
                """
            )
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Sensor (
                    sensor_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    plantation_id INTEGER NOT NULL,
                    sensor_type TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'active',
                    min_threshold REAL,
                    max_threshold REAL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP,
                    FOREIGN KEY (plantation_id) REFERENCES Plantations(plantation_id) ON DELETE CASCADE
                )
                """
            )
            db.execute("CREATE INDEX IF NOT EXISTS idx_sensor_plantation ON Sensor(plantation_id)")
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS SensorReading (
                    reading_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    sensor_id INTEGER NOT NULL,
                    value REAL NOT NULL,
                    timestamp TEXT NOT NULL,
                    FOREIGN KEY (sensor_id) REFERENCES Sensor(sensor_id) ON DELETE CASCADE
                )
                """
            )
            db.execute(
                "CREATE INDEX IF NOT EXISTS idx_sensor_reading_latest ON SensorReading(sensor_id, timestamp DESC)"
            )
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Actuator (
                    actuator_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    plantation_id INTEGER NOT NULL,
                    name VARCHAR(100) NOT NULL,
                    actuator_type VARCHAR(50) NOT NULL,
                    status TEXT NOT NULL DEFAULT 'inactive',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP,
                    FOREIGN KEY (plantation_id) REFERENCES Plantations(plantation_id) ON DELETE CASCADE
                )
                """
            )
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Event (
                    event_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    event_type TEXT NOT NULL,
                    description TEXT NOT NULL,
                    sensor_id INTEGER,
                    actuator_id INTEGER,
                    created_at TIMESTAMP NOT NULL,
                    FOREIGN KEY (sensor_id) REFERENCES Sensor(sensor_id) ON DELETE SET NULL,
                    FOREIGN KEY (actuator_id) REFERENCES Actuator(actuator_id) ON DELETE SET NULL
                )
                """
            )
            db.execute("CREATE INDEX IF NOT EXISTS idx_event_sensor ON Event(sensor_id, created_at DESC)")
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Notification (
                    notification_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    channel TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'pending',
                    event_id INTEGER NOT NULL,
                    user_id INTEGER NOT NULL,
                    sent_at TIMESTAMP,
                    is_read BOOLEAN NOT NULL DEFAULT 0,
                    read_at TIMESTAMP,
                    error TEXT,
                    created_at TIMESTAMP NOT NULL,
                    FOREIGN KEY (event_id) REFERENCES Event(event_id) ON DELETE CASCADE,
                    FOREIGN KEY (user_id) REFERENCES Users(id) ON DELETE CASCADE
                )
                """
            )
            db.execute(
                "CREATE INDEX IF NOT EXISTS idx_notification_user ON Notification(user_id, created_at DESC)"
            )
            db.execute("CREATE INDEX IF NOT EXISTS idx_notification_event ON Notification(event_id)")
        logger.info("Database tables ready at %s", self._database_path)
