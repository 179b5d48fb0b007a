#!filepath: steplog/observability/progress.py
import time
from typing import Callable

from steplog import logs


class ProgressReporter:
    """
    Time-step 进度日志（不依赖 Rich/TQDM，不影响 pytest）
    - start(task, total)
    - update(task, current)  -> elapsed / ETA
    - done(task)
    """

    def __init__(self, enabled: bool = True, clock: Callable[[], float] = time.perf_counter):
        self.enabled = enabled
        self._clock = clock
        self._t0 = 0.0
        self._total = 0

    def start(self, task: str, total: int, unit: str = "steps"):
        self._t0 = self._clock()
        self._total = int(total)
        if not self.enabled:
            return
        logs.info(f"[Progress] {task} started total={self._total} {unit}")

    def eta(self, current: int) -> float:
        if current <= 0:
            return 0.0
        elapsed = self._clock() - self._t0
        return (elapsed / current) * max(self._total - current, 0)

    def update(self, task: str, current: int, unit: str = "steps"):
        if not self.enabled:
            return
        elapsed = self._clock() - self._t0
        logs.info(
            f"[Progress] {task}: {current}/{self._total} {unit} "
            f"| elapsed={elapsed:.2f}s | ETA={self.eta(current):.2f}s"
        )

    def done(self, task: str):
        if not self.enabled:
            return
        elapsed = self._clock() - self._t0
        logs.info(f"[Progress] {task} done total_time={elapsed:.2f}s")
