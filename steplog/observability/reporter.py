#!filepath: steplog/observability/reporter.py
from typing import Callable, List

from rich.console import Console

from steplog.observability.tally import Tally

ConsoleSink = Callable[[str], None]

NAME_WIDTH = 24
VALUE_WIDTH = 13
RULE = "-" * (NAME_WIDTH + VALUE_WIDTH)

_console = Console(highlight=False)


def console_sink(line: str) -> None:
    """默认终端输出：不解析 rich markup（event 名里可能有方括号）"""
    _console.print(line, markup=False, emoji=False, soft_wrap=True)


def format_pair(name: str, value: float) -> str:
    return f"{name} : {value:g}"


def format_table(tally: Tally) -> List[str]:
    """
    对齐表格：
        <空行>
        name(右对齐 24)  seconds(右对齐 13, 4 位小数)
        -------------------------------------
        TOTAL
    """
    lines = [""]
    for name, sec in tally.items():
        lines.append(f"{name:>{NAME_WIDTH}}{sec:>{VALUE_WIDTH}.4f}")
    lines.append(RULE)
    lines.append(f"{'TOTAL':>{NAME_WIDTH}}{tally.total():>{VALUE_WIDTH}.4f}")
    return lines


class LedgerReporter:
    """
    Ledger 的终端报告（冷路径）
    """

    def __init__(self, sink: ConsoleSink = console_sink):
        self.sink = sink

    def pair(self, name: str, value: float) -> None:
        self.sink(format_pair(name, value))

    def table(self, tally: Tally) -> float:
        for line in format_table(tally):
            self.sink(line)
        return tally.total()
