"""Entry points for the FarmWatch backend.

``farmwatch-server`` serves Socket.IO with the liveness sweeper running.
``farmwatch-sweep`` runs a single liveness sweep, for cron-style scheduling.
"""

from __future__ import annotations

import logging
import os

from farmwatch import create_app
from farmwatch.config import _env_bool

logger = logging.getLogger(__name__)


def main() -> int:
    from farmwatch.extensions import socketio

    app = create_app(start_scheduler=True)
    host = os.getenv("FARMWATCH_HOST", "0.0.0.0")
    port = int(os.getenv("FARMWATCH_PORT", "8000"))
    debug = _env_bool("FARMWATCH_DEBUG")

    logger.info("Starting server on %s:%s", host, port)
    try:
        socketio.run(app, host=host, port=port, debug=debug, use_reloader=False, allow_unsafe_werkzeug=True)
    except KeyboardInterrupt:
        logger.info("Server stopped by user.")
    return 0


def sweep_main() -> int:
    app = create_app()
    container = app.extensions["farmwatch"]
    count = container.liveness_sweeper.run_once()
    logger.info("Liveness sweep done: %s event(s)", count)
    container.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
