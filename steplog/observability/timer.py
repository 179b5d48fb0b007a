#!filepath: steplog/observability/timer.py
import time
from typing import Callable, Dict

from steplog.utils.errors import UnstartedTimerError


class Timer:
    """
    Tic 注册表
    - start(name)      记录 tic，重复 start 直接覆盖（不报错）
    - end(name)        返回耗时秒数并消费 tic
    - 未 start 就 end  -> UnstartedTimerError
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._clock = clock
        self._start: Dict[str, float] = {}

    def start(self, name: str) -> None:
        self._start[name] = self._clock()

    def end(self, name: str) -> float:
        toc = self._clock()
        if name not in self._start:
            raise UnstartedTimerError(name)
        return toc - self._start.pop(name)

    def running(self, name: str) -> bool:
        return name in self._start
