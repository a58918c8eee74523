"""
Configuration for FarmWatch
===========================
Runtime settings for the monitoring pipeline and its delivery channels.
Sets up the logging configuration as well.
"""

import logging
import os
import sys
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import timedelta
from logging.handlers import RotatingFileHandler
from typing import Any

from farmwatch.domain.exceptions import ConfigurationError
from farmwatch.services.utilities.whatsapp_service import TWILIO_SANDBOX_NUMBER


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be an integer.") from None


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be a number.") from None


@dataclass
class AppConfig:
    """Runtime configuration loaded from environment variables."""

    environment: str = field(default_factory=lambda: os.getenv("FARMWATCH_ENV", "development"))
    secret_key: str = field(default_factory=lambda: os.getenv("FARMWATCH_SECRET_KEY", "FarmWatchDevSecretKey"))
    database_path: str = field(default_factory=lambda: os.getenv("FARMWATCH_DATABASE_PATH", "database/farmwatch.db"))
    socketio_cors_origins: str = field(default_factory=lambda: os.getenv("FARMWATCH_SOCKETIO_CORS", "*"))

    DEBUG: bool = field(default_factory=lambda: _env_bool("FARMWATCH_DEBUG", False))
    log_level: str = field(default_factory=lambda: os.getenv("FARMWATCH_LOG_LEVEL", "INFO"))
    audit_log_path: str = field(default_factory=lambda: os.getenv("FARMWATCH_AUDIT_LOG_PATH", "logs/audit.log"))

    # Monitoring
    sensor_staleness_minutes: int = field(
        default_factory=lambda: _env_int("FARMWATCH_SENSOR_STALENESS_MINUTES", 60)
    )
    liveness_sweep_interval_seconds: float = field(
        default_factory=lambda: _env_float("FARMWATCH_LIVENESS_SWEEP_INTERVAL_SECONDS", 300.0)
    )

    # Dispatch
    dispatch_max_workers: int = field(default_factory=lambda: _env_int("FARMWATCH_DISPATCH_MAX_WORKERS", 4))
    delivery_timeout_seconds: float = field(
        default_factory=lambda: _env_float("FARMWATCH_DELIVERY_TIMEOUT_SECONDS", 10.0)
    )

    # WhatsApp (Twilio)
    whatsapp_enabled: bool = field(default_factory=lambda: _env_bool("FARMWATCH_WHATSAPP_ENABLED", False))
    twilio_account_sid: str = field(default_factory=lambda: os.getenv("TWILIO_ACCOUNT_SID", ""))
    twilio_auth_token: str = field(default_factory=lambda: os.getenv("TWILIO_AUTH_TOKEN", ""))
    twilio_whatsapp_number: str = field(
        default_factory=lambda: os.getenv("TWILIO_WHATSAPP_NUMBER", TWILIO_SANDBOX_NUMBER)
    )
    whatsapp_timeout_seconds: float = field(
        default_factory=lambda: _env_float("FARMWATCH_WHATSAPP_TIMEOUT_SECONDS", 10.0)
    )

    _DEFAULT_SECRET_KEY = "FarmWatchDevSecretKey"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.sensor_staleness_minutes <= 0:
            raise ConfigurationError("FARMWATCH_SENSOR_STALENESS_MINUTES must be positive")
        if self.liveness_sweep_interval_seconds <= 0:
            raise ConfigurationError("FARMWATCH_LIVENESS_SWEEP_INTERVAL_SECONDS must be positive")
        if self.dispatch_max_workers <= 0:
            raise ConfigurationError("FARMWATCH_DISPATCH_MAX_WORKERS must be positive")
        if self.delivery_timeout_seconds <= 0:
            raise ConfigurationError("FARMWATCH_DELIVERY_TIMEOUT_SECONDS must be positive")

        # WhatsApp needs Twilio credentials once enabled
        if self.whatsapp_enabled and not (self.twilio_account_sid and self.twilio_auth_token):
            raise ConfigurationError(
                "WhatsApp is enabled but TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN are not set",
                detail={"whatsapp_enabled": True},
            )

        if self.environment == "production" and self.secret_key == self._DEFAULT_SECRET_KEY:
            raise ConfigurationError(
                "Cannot use the default secret key in production. Set FARMWATCH_SECRET_KEY."
            )

    @property
    def staleness_window(self) -> timedelta:
        return timedelta(minutes=self.sensor_staleness_minutes)

    def as_flask_config(self) -> dict[str, Any]:
        """Render configuration values for Flask application."""
        return {
            "ENV": self.environment,
            "SECRET_KEY": self.secret_key,
            "DATABASE_PATH": self.database_path,
            "DEBUG": self.DEBUG,
        }


def setup_logging(debug: bool = False) -> None:
    """Setup logging configuration."""
    log_level = logging.DEBUG if debug else logging.INFO

    root = logging.getLogger()
    root.setLevel(log_level)

    # Avoid duplicate handlers when called more than once per process
    has_console = any(getattr(h, "name", "") == "farmwatch_console" for h in root.handlers)
    has_file = any(getattr(h, "name", "") == "farmwatch_file" for h in root.handlers)
    added_handler = False

    stream = sys.stdout
    with suppress(AttributeError, ValueError):
        stream.reconfigure(encoding="utf-8", errors="replace")
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if not has_console:
        console_handler = logging.StreamHandler(stream=stream)
        console_handler.name = "farmwatch_console"
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
        added_handler = True

    if not has_file:
        os.makedirs("logs", exist_ok=True)
        file_handler = RotatingFileHandler(
            "logs/farmwatch.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.name = "farmwatch_file"
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        added_handler = True

    for handler in root.handlers:
        if getattr(handler, "name", "") in {"farmwatch_console", "farmwatch_file"}:
            handler.setLevel(log_level)

    if added_handler:
        root.info("Logging initialized at level: %s", logging.getLevelName(log_level))

    # Socket.IO polling is noisy at INFO
    logging.getLogger("socketio").setLevel(logging.WARNING)
    logging.getLogger("engineio").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def load_config() -> AppConfig:
    """Helper for callers to load and validate configuration."""
    return AppConfig()
