#!filepath: tests/observability/test_step_loop.py
from pathlib import Path

import pytest

from steplog.config.ledger_config import LedgerConfig
from steplog.config.sim_params import SimParams
from steplog.observability.ledger import Ledger, LedgerState, NoOpLedger
from steplog.observability.progress import ProgressReporter
from steplog.observability.step_loop import StepLoop


def make_params(**overrides) -> SimParams:
    raw = {"dt": 0.01, "nt": 4, "nsave": 2, "startStep": 0}
    raw.update(overrides)
    return SimParams(**raw)


def test_steps_flush_and_reset_each_step(case_dir: Path, clock):
    ledger = Ledger(case_dir, clock=clock)
    loop = StepLoop(ledger, make_params(), progress=ProgressReporter(enabled=False))

    seen = []
    for n in loop.steps():
        seen.append(n)
        with ledger.timer("solve"):
            clock.advance(1.0)
    ledger.close()

    assert seen == [1, 2, 3, 4]
    assert (case_dir / "profiling").read_text().splitlines() == [
        "1\t1\t", "2\t1\t", "3\t1\t", "4\t1\t",
    ]
    # write_time 只在循环结束时调用一次
    assert (case_dir / "time").read_text() == "solve 4\n"
    assert ledger.step_elapsed("solve") == 0.0


def test_steps_start_after_start_step(clock):
    ledger = Ledger(clock=clock)
    loop = StepLoop(ledger, make_params(startStep=100, nt=3), progress=ProgressReporter(enabled=False))

    assert list(loop.steps()) == [101, 102, 103]


def test_run_calls_body_per_step(clock):
    ledger = Ledger(clock=clock)
    loop = StepLoop(ledger, make_params(nt=3), progress=ProgressReporter(enabled=False))

    calls = []
    loop.run(calls.append)

    assert calls == [1, 2, 3]


def test_print_now_dumps_table_at_end(clock, console):
    ledger = Ledger(clock=clock, sink=console.append, print_now=True)
    loop = StepLoop(ledger, make_params(nt=2), progress=ProgressReporter(enabled=False))

    for _ in loop.steps():
        with ledger.timer("solve"):
            clock.advance(0.5)

    assert console[-1] == f"{'TOTAL':>24}{'1.0000':>13}"


def test_progress_reported_every_nsave(clock):
    class Recorder(ProgressReporter):
        def __init__(self):
            super().__init__(enabled=False)
            self.updates = []

        def update(self, task, current, unit="steps"):
            self.updates.append(current)

    rec = Recorder()
    loop = StepLoop(Ledger(clock=clock), make_params(nt=5, nsave=2), progress=rec)
    list(loop.steps())

    assert rec.updates == [2, 4, 5]


def test_open_ledger_disabled_returns_noop(tmp_path: Path):
    ledger = StepLoop.open_ledger(LedgerConfig(enabled=False), tmp_path)

    assert isinstance(ledger, NoOpLedger)


def test_open_ledger_creates_directory(tmp_path: Path):
    target = tmp_path / "runs" / "case1"
    ledger = StepLoop.open_ledger(LedgerConfig(print_now=True), target)

    assert isinstance(ledger, Ledger)
    assert ledger.state is LedgerState.ACTIVE
    assert ledger.print_now is True
    assert (target / "profiling").exists()
    ledger.close()


def test_open_ledger_uses_config_output_dir(tmp_path: Path):
    cfg = LedgerConfig(output_dir=str(tmp_path / "out"))
    with StepLoop.open_ledger(cfg) as ledger:
        assert ledger.folder == tmp_path / "out"


def test_open_ledger_without_dir_is_in_memory():
    ledger = StepLoop.open_ledger(LedgerConfig())

    assert ledger.state is LedgerState.UNINITIALIZED
