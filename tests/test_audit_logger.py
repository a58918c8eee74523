import json
import logging

from infrastructure.logging.audit import AuditLogger


class _Collect(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


def test_log_delivery_writes_json(tmp_path):
    audit = AuditLogger(str(tmp_path / "audit.log"))
    collector = _Collect()
    audit.logger.addHandler(collector)
    try:
        audit.log_delivery(12, "whatsapp", "error", event_id=3, user_id=7, error="timeout")
    finally:
        audit.logger.removeHandler(collector)

    record = json.loads(collector.messages[0])
    assert record["resource"] == "notification:12"
    assert record["outcome"] == "error"
    assert record["meta"] == {"channel": "whatsapp", "event_id": 3, "user_id": 7, "error": "timeout"}


def test_new_log_path_moves_the_trail(tmp_path):
    first = AuditLogger(str(tmp_path / "first" / "audit.log"))
    first.log_event("sweeper", "sweep", "plantation:1", "ok")
    second = AuditLogger(str(tmp_path / "second" / "audit.log"))

    second.log_event("dispatcher", "deliver", "notification:5", "sent")
    for handler in second.logger.handlers:
        handler.flush()

    first_lines = (tmp_path / "first" / "audit.log").read_text(encoding="utf-8").splitlines()
    second_lines = (tmp_path / "second" / "audit.log").read_text(encoding="utf-8").splitlines()
    assert len(first_lines) == 1 and "plantation:1" in first_lines[0]
    assert len(second_lines) == 1 and "notification:5" in second_lines[0]
