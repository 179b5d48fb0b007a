#!filepath: steplog/observability/ledger.py
from __future__ import annotations

import time
from contextlib import contextmanager, nullcontext
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from steplog import logs
from steplog.observability.reporter import ConsoleSink, LedgerReporter, console_sink
from steplog.observability.tally import Tally
from steplog.observability.timer import Timer
from steplog.observability.writers import LedgerFiles
from steplog.utils.errors import LedgerClosedError


class LedgerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    CLOSED = "closed"


class Ledger:
    """
    Instrumentation Ledger（单进程、单写者）

    每个 event 记录：
      - 累计耗时（整个 run）       -> time
      - 当前 time step 的耗时      -> profiling（每步一行）
      - 内存计数（alloc / free）

    生命周期：
      Ledger()        -> UNINITIALIZED：只在内存中累计，write_* 为空操作
      Ledger(folder)  -> ACTIVE：打开 time / profiling / profiling_legend
      close()         -> CLOSED：写 legend，关闭文件；之后的写操作抛 LedgerClosedError

    约定：
      1. 重复 start_timer 覆盖上一次 tic（不报错）
      2. stop_timer 未 start -> UnstartedTimerError，不修改任何 tally
      3. 未出现过的 event 读出 0.0
      4. start_timer / stop_timer 不打日志（热路径）

    Usage::

        with Ledger(case_dir) as ledger:
            for n in range(1, nt + 1):
                with ledger.timer("solvePoisson"):
                    ...
                ledger.write_time_step(n)
                ledger.reset_time_step()
            ledger.write_time()
    """

    def __init__(
        self,
        folder: Optional[str | Path] = None,
        *,
        print_now: bool = False,
        clock: Callable[[], float] = time.perf_counter,
        sink: ConsoleSink = console_sink,
    ):
        self.print_now = print_now

        self._timer = Timer(clock)
        self._cumulative = Tally()
        self._step = Tally()
        self._memory = Tally()
        self._reporter = LedgerReporter(sink)

        self._files: Optional[LedgerFiles] = None
        self._state = LedgerState.UNINITIALIZED

        if folder is not None:
            self._files = LedgerFiles(folder)
            self._state = LedgerState.ACTIVE

    # ---------------------------------------------------------
    # state
    # ---------------------------------------------------------
    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is LedgerState.CLOSED

    @property
    def folder(self) -> Optional[Path]:
        return self._files.folder if self._files is not None else None

    def _check_open(self, op: str) -> None:
        if self._state is LedgerState.CLOSED:
            raise LedgerClosedError(f"{op}() called on a closed ledger")

    # ---------------------------------------------------------
    # Timer registry
    # ---------------------------------------------------------
    def start_timer(self, event: str) -> None:
        self._check_open("start_timer")
        self._timer.start(event)
        self._cumulative.touch(event)
        self._step.touch(event)

    def stop_timer(self, event: str, echo: bool = False) -> float:
        """
        Stop ``event`` and add the elapsed seconds to both the cumulative
        and the time-step tally. Returns the elapsed seconds.
        """
        self._check_open("stop_timer")
        delta = self._timer.end(event)
        self._step.add(event, delta)
        total = self._cumulative.add(event, delta)
        if echo:
            self._reporter.pair(event, total)
        return delta

    @contextmanager
    def timer(self, event: str, echo: bool = False) -> Iterator[None]:
        self.start_timer(event)
        try:
            yield
        finally:
            self.stop_timer(event, echo=echo)

    def erase_timer(self, event: str) -> None:
        """
        只从累计 tally 删除（time step / memory 不动）。

        event 仍占着 profiling 的一列，legend 却不再列出它；
        close() 时会额外写 profiling_columns 供 loader 对齐。
        """
        self._check_open("erase_timer")
        self._cumulative.erase(event)
        if event in self._step:
            logs.warning(
                f"[Ledger] erase_timer('{event}'): profiling columns no longer "
                f"match profiling_legend"
            )

    # ---------------------------------------------------------
    # Accumulators
    # ---------------------------------------------------------
    def reset_timer(self) -> None:
        self._check_open("reset_timer")
        self._cumulative.reset()

    def reset_time_step(self) -> None:
        self._check_open("reset_time_step")
        self._step.reset()

    def elapsed(self, event: str) -> float:
        """累计耗时；未知 event -> 0.0"""
        return self._cumulative.get(event)

    def step_elapsed(self, event: str) -> float:
        """当前 time step 耗时；未知 event -> 0.0"""
        return self._step.get(event)

    def events(self) -> List[str]:
        return self._cumulative.names()

    def step_events(self) -> List[str]:
        return self._step.names()

    # ---------------------------------------------------------
    # Memory ledger
    # ---------------------------------------------------------
    def alloc_memory(self, event: str, nbytes: float) -> None:
        self._check_open("alloc_memory")
        self._memory.add(event, nbytes)

    def free_memory(self, event: str, nbytes: float) -> None:
        self._check_open("free_memory")
        self._memory.add(event, -nbytes)

    def memory(self, event: str) -> float:
        return self._memory.get(event)

    # ---------------------------------------------------------
    # Console（冷路径）
    # ---------------------------------------------------------
    def print_time(self, event: str) -> None:
        self._check_open("print_time")
        self._reporter.pair(event, self._cumulative.get(event))

    def print_memory(self, event: str) -> None:
        self._check_open("print_memory")
        self._reporter.pair(event, self._memory.get(event))

    def print_all_time(self) -> float:
        self._check_open("print_all_time")
        return self._reporter.table(self._cumulative)

    # ---------------------------------------------------------
    # Files
    # ---------------------------------------------------------
    def _writable(self, op: str) -> bool:
        self._check_open(op)
        if self._files is None:
            logs.debug(f"[Ledger] {op}() skipped: no output directory")
            return False
        return True

    def write_legend(self) -> None:
        if self._writable("write_legend"):
            self._files.write_legend(self._cumulative.names())

    def write_time(self) -> None:
        if self._writable("write_time"):
            self._files.write_totals(self._cumulative)

    def write_time_step(self, step: int) -> None:
        if self._writable("write_time_step"):
            self._files.write_step(step, self._step)

    def flush(self) -> None:
        if self._writable("flush"):
            self._files.flush()

    def close(self) -> None:
        """
        写 legend 并关闭文件。重复调用为空操作。
        """
        if self._state is LedgerState.CLOSED:
            return
        try:
            if self._files is not None:
                self._files.write_legend(self._cumulative.names())
                columns = self._step.names()
                if columns != self._cumulative.names():
                    logs.warning(
                        f"[Ledger] profiling columns differ from legend, "
                        f"writing profiling_columns in {self._files.folder}"
                    )
                    self._files.write_columns(columns)
        finally:
            if self._files is not None:
                self._files.close()
            self._state = LedgerState.CLOSED
        logs.debug(f"[Ledger] closed with {len(self._cumulative)} events")

    def __enter__(self) -> "Ledger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Ledger(folder={self.folder}, state={self._state.value}, "
            f"events={self._cumulative.names()})"
        )


# -------------------------------------------------------------
# No-op Ledger（非主进程 / observability 关闭）
# -------------------------------------------------------------
class NoOpLedger:
    """Ledger disabled 时使用：接口相同，不做任何事。"""

    print_now = False
    state = LedgerState.UNINITIALIZED
    closed = False
    folder = None

    def start_timer(self, event: str) -> None:
        pass

    def stop_timer(self, event: str, echo: bool = False) -> float:
        return 0.0

    def timer(self, event: str, echo: bool = False):
        return nullcontext()

    def erase_timer(self, event: str) -> None:
        pass

    def reset_timer(self) -> None:
        pass

    def reset_time_step(self) -> None:
        pass

    def elapsed(self, event: str) -> float:
        return 0.0

    def step_elapsed(self, event: str) -> float:
        return 0.0

    def events(self) -> List[str]:
        return []

    def step_events(self) -> List[str]:
        return []

    def alloc_memory(self, event: str, nbytes: float) -> None:
        pass

    def free_memory(self, event: str, nbytes: float) -> None:
        pass

    def memory(self, event: str) -> float:
        return 0.0

    def print_time(self, event: str) -> None:
        pass

    def print_memory(self, event: str) -> None:
        pass

    def print_all_time(self) -> float:
        return 0.0

    def write_legend(self) -> None:
        pass

    def write_time(self) -> None:
        pass

    def write_time_step(self, step: int) -> None:
        pass

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass

    def __enter__(self) -> "NoOpLedger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        pass
