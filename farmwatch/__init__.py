"""
FarmWatch
=========

Threshold evaluation and multi-channel notification dispatch for farm
telemetry.
"""

from __future__ import annotations

import atexit
import logging
from typing import Any

from flask import Flask

__version__ = "1.0.0"


def create_app(config_overrides: dict[str, Any] | None = None, *, start_scheduler: bool = False) -> Flask:
    """
    Build the Flask app hosting the monitoring pipeline.

    The service container is stored in ``app.extensions["farmwatch"]``.
    """
    from farmwatch.config import load_config, setup_logging
    from farmwatch.extensions import init_extensions, socketio
    from farmwatch.services.container import ServiceContainer

    config = load_config()
    if config_overrides:
        for key, value in config_overrides.items():
            setattr(config, key if hasattr(config, key) else key.lower(), value)
        config.__post_init__()

    setup_logging(debug=config.DEBUG)

    flask_app = Flask(__name__)
    flask_app.config.update(config.as_flask_config())

    # Socket.IO first: the emitter needs it
    init_extensions(flask_app, config.socketio_cors_origins)

    container = ServiceContainer.build(config, socketio=socketio)
    container.database.init_app(flask_app)
    flask_app.extensions["farmwatch"] = container

    if start_scheduler:
        container.liveness_sweeper.start()

    atexit.register(container.shutdown)
    logging.getLogger(__name__).info("FarmWatch %s ready (%s)", __version__, config.environment)
    return flask_app


__all__ = ["__version__", "create_app"]
