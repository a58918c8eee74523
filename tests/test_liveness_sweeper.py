import threading
from unittest.mock import MagicMock

import pytest

from farmwatch.workers.liveness_sweeper import LivenessSweeper


def test_run_once_counts_events():
    service = MagicMock()
    service.sweep_all.return_value = [object(), object()]

    assert LivenessSweeper(service, interval_seconds=60).run_once() == 2


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        LivenessSweeper(MagicMock(), interval_seconds=0)


def test_loop_survives_failing_sweep():
    calls = threading.Event()
    attempts = []

    def sweep_all():
        attempts.append(1)
        if len(attempts) >= 2:
            calls.set()
            return []
        raise RuntimeError("database locked")

    service = MagicMock()
    service.sweep_all.side_effect = sweep_all
    sweeper = LivenessSweeper(service, interval_seconds=0.01)

    sweeper.start()
    try:
        assert calls.wait(2.0)
        assert sweeper.running
    finally:
        sweeper.stop()

    assert not sweeper.running
