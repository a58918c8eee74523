import json
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict


class AuditLogger:
    """
    Append-only JSON-lines trail of delivery outcomes and state changes.

    The ``farmwatch.audit`` logger is process-wide and writes to one file at a
    time: building an AuditLogger for another path moves the trail there.
    """

    def __init__(self, log_path: str, level: str = "INFO") -> None:
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger("farmwatch.audit")
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.propagate = False

        target = os.path.abspath(self.log_path)
        for existing in list(self.logger.handlers):
            if isinstance(existing, RotatingFileHandler) and existing.baseFilename != target:
                self.logger.removeHandler(existing)
                existing.close()

        if not any(isinstance(handler, RotatingFileHandler) for handler in self.logger.handlers):
            handler = RotatingFileHandler(
                filename=str(self.log_path),
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=30,
                encoding="utf-8",
                delay=True,
            )
            handler.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)sZ | %(levelname)s | %(message)s",
                    datefmt="%Y-%m-%dT%H:%M:%S",
                )
            )
            self.logger.addHandler(handler)

    def log_event(self, actor: str, action: str, resource: str, outcome: str, **metadata: Any) -> None:
        payload: Dict[str, Any] = {
            "actor": actor,
            "action": action,
            "resource": resource,
            "outcome": outcome,
        }
        if metadata:
            payload["meta"] = metadata

        self.logger.info(json.dumps(payload, default=str))

    def log_delivery(
        self,
        notification_id: int,
        channel: str,
        outcome: str,
        *,
        event_id: int | None = None,
        user_id: int | None = None,
        error: str | None = None,
    ) -> None:
        meta: Dict[str, Any] = {"channel": channel, "event_id": event_id, "user_id": user_id}
        if error:
            meta["error"] = error
        self.log_event(
            actor="dispatcher",
            action="deliver",
            resource=f"notification:{notification_id}",
            outcome=outcome,
            **meta,
        )
