"""Errors raised across the monitoring and notification pipeline.

Services raise the narrowest class that fits; callers that only need to know
"something in FarmWatch failed" catch :class:`FarmWatchError`.

::

    FarmWatchError
    ├── ValidationError              reading, threshold or recipient data is unusable
    ├── NotFoundError                sensor, plantation, event, user or notification missing
    ├── ConflictError                notification or device state forbids the change
    ├── ServiceError
    │   ├── RepositoryError          SQLite read or write failed
    │   └── ExternalServiceError     Twilio rejected the message or was unreachable
    └── ConfigurationError           settings are missing or contradictory
        └── UnsupportedChannelError  no handler can deliver on the selected channel

Delivery failures never leave the dispatcher: the channel records ERROR on the
notification and the dispatcher logs the exception. Repository and
configuration errors do propagate to the caller.
"""

from __future__ import annotations


class FarmWatchError(Exception):
    """
    Root of the FarmWatch hierarchy.

    ``detail`` carries identifiers (sensor, notification, channel...) that the
    audit trail and log lines pick up; ``http_status`` is what a web layer
    would answer with.
    """

    http_status: int = 500

    def __init__(self, message: str = "", *, detail: dict | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


class ValidationError(FarmWatchError):
    """Input cannot be used as given, e.g. ``min >= max`` or a recipient without a phone."""

    http_status: int = 400


class NotFoundError(FarmWatchError):
    http_status: int = 404


class ConflictError(FarmWatchError):
    """The current state rules the operation out, e.g. reading an undelivered notification."""

    http_status: int = 409


class ServiceError(FarmWatchError):
    http_status: int = 500


class RepositoryError(ServiceError):
    """Wraps the ``sqlite3.Error`` raised by an ops mixin."""

    http_status: int = 500


class ExternalServiceError(ServiceError):
    """The WhatsApp provider refused the message, answered with an error or timed out."""

    http_status: int = 502


class ConfigurationError(FarmWatchError):
    """Settings are missing or invalid; raised at startup or at channel selection, never retried."""

    http_status: int = 500


class UnsupportedChannelError(ConfigurationError):
    """Email, an unknown channel, or WhatsApp while no provider is configured."""
