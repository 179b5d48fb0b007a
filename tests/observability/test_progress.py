#!filepath: tests/observability/test_progress.py

import pytest
from loguru import logger

from steplog.observability.progress import ProgressReporter


def test_progress_logs_eta(clock):
    p = ProgressReporter(enabled=True, clock=clock)

    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))

    p.start("time loop", 10)
    clock.advance(2.0)
    p.update("time loop", 4)
    p.done("time loop")

    logger.remove(sink_id)
    output = "\n".join(captured)

    assert "time loop started total=10" in output
    assert "4/10 steps" in output
    assert "ETA=3.00s" in output
    assert "time loop done" in output


def test_progress_eta(clock):
    p = ProgressReporter(clock=clock)
    p.start("t", 100)
    clock.advance(10.0)

    assert p.eta(0) == 0.0
    assert p.eta(50) == pytest.approx(10.0)
    assert p.eta(100) == 0.0


def test_progress_disabled(clock):
    p = ProgressReporter(enabled=False, clock=clock)

    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))
    p.start("Task", 10)
    p.update("Task", 3)
    p.done("Task")
    logger.remove(sink_id)

    assert captured == []
