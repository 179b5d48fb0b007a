#!filepath: steplog/observability/step_loop.py
from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Union

from steplog import logs
from steplog.config.ledger_config import LedgerConfig
from steplog.config.sim_params import SimParams
from steplog.observability.ledger import Ledger, NoOpLedger
from steplog.observability.progress import ProgressReporter
from steplog.utils.filesystem import FileSystem

AnyLedger = Union[Ledger, NoOpLedger]


class StepLoop:
    """
    Time-step 驱动（owner 侧 glue）

    每个 step 结束后：
      1. ledger.write_time_step(n)
      2. ledger.reset_time_step()
      3. 每 nsave 步打一次进度
    循环结束后：
      - ledger.write_time()
      - print_now -> ledger.print_all_time()

    循环被 break / 异常中断时，当前 step 不会被 flush，也不会写 time。
    """

    def __init__(
        self,
        ledger: AnyLedger,
        params: SimParams,
        progress: Optional[ProgressReporter] = None,
        task: str = "time loop",
    ):
        self.ledger = ledger
        self.params = params
        self.progress = progress or ProgressReporter()
        self.task = task

    def steps(self) -> Iterator[int]:
        p = self.params
        first = p.start_step + 1

        logs.info(
            f"[StepLoop] steps {first}..{p.last_step} (nt={p.nt}, nsave={p.nsave})"
        )
        self.progress.start(self.task, p.nt)

        for i, n in enumerate(range(first, p.last_step + 1), start=1):
            yield n

            self.ledger.write_time_step(n)
            self.ledger.reset_time_step()

            if i % p.nsave == 0 or n == p.last_step:
                self.progress.update(self.task, i)

        self.ledger.write_time()
        if self.ledger.print_now:
            self.ledger.print_all_time()

        self.progress.done(self.task)

    def run(self, body) -> None:
        """body(n) 对每个 step 调用一次"""
        for n in self.steps():
            body(n)

    @staticmethod
    def open_ledger(
        config: LedgerConfig,
        folder: Optional[str | Path] = None,
        **kwargs,
    ) -> AnyLedger:
        """
        按 LedgerConfig 构造 ledger：
          - enabled=False          -> NoOpLedger
          - 没有 folder/output_dir -> 内存 Ledger（write_* 为空操作）
          - 否则确保目录存在后打开
        """
        if not config.enabled:
            logs.debug("[StepLoop] ledger disabled -> NoOpLedger")
            return NoOpLedger()

        target = folder if folder is not None else config.output_dir
        if target is None:
            return Ledger(print_now=config.print_now, **kwargs)

        FileSystem.ensure_dir(target)
        return Ledger(target, print_now=config.print_now, **kwargs)
