#!filepath: steplog/observability/writers.py
from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path
from typing import IO, Iterable, Tuple

from steplog import logs
from steplog.observability.tally import Tally
from steplog.utils.errors import StreamOpenError

# 下游分析脚本依赖这三个文件名，不可修改
TIME_FILE = "time"
PROFILING_FILE = "profiling"
LEGEND_FILE = "profiling_legend"

LEDGER_FILES: Tuple[str, str, str] = (TIME_FILE, PROFILING_FILE, LEGEND_FILE)

# 仅在 erase_timer 之后写：profiling 的真实列名（step tally 顺序）
COLUMNS_FILE = "profiling_columns"


def fmt_value(value: float) -> str:
    """%g, six significant digits (same as a default C++ ostream)."""
    return f"{value:g}"


# ---------------------------------------------------------
# line formatters（纯函数，便于测试）
# ---------------------------------------------------------
def format_totals(tally: Tally) -> str:
    """<name> <seconds>\\n per event."""
    return "".join(f"{name} {fmt_value(sec)}\n" for name, sec in tally.items())


def format_legend(names: Iterable[str]) -> str:
    return "".join(f"{name}\n" for name in names)


def format_step(step: int, tally: Tally) -> str:
    """<step>\\t<v1>\\t<v2>\\t...\\t\\n (values only, trailing tab kept)."""
    cells = [str(step)] + [fmt_value(v) for v in tally.values()]
    return "\t".join(cells) + "\t\n"


class LedgerFiles:
    """
    三个输出流，构造时一次性打开，close() 统一释放。

    - time              : 累计耗时
    - profiling         : 每个 time step 一行
    - profiling_legend  : profiling 的列名
    - profiling_columns : 只在列顺序与 legend 不一致时于 close 前写入

    任一文件打开失败 -> 已打开的全部关闭，抛 StreamOpenError
    """

    def __init__(self, folder: str | Path):
        self.folder = Path(folder)

        with ExitStack() as stack:
            self.time = self._open(stack, TIME_FILE)
            self.profiling = self._open(stack, PROFILING_FILE)
            self.legend = self._open(stack, LEGEND_FILE)
            # 上一次 run 残留的列名文件会误导 loader
            (self.folder / COLUMNS_FILE).unlink(missing_ok=True)
            # 全部成功才接管所有权
            self._stack = stack.pop_all()

        self.closed = False
        logs.debug(f"[Ledger] opened output files in {self.folder}")

    def _open(self, stack: ExitStack, name: str) -> IO[str]:
        path = self.folder / name
        try:
            # 行缓冲：每写完一行即可被 tail / 绘图脚本读到
            fh = open(path, "w", encoding="utf-8", buffering=1)
        except OSError as e:
            logs.error(f"[Ledger] cannot open {path}: {e}")
            raise StreamOpenError(path, e.strerror or str(e)) from e
        return stack.enter_context(fh)

    def write_totals(self, tally: Tally) -> None:
        self.time.write(format_totals(tally))

    def write_step(self, step: int, tally: Tally) -> None:
        self.profiling.write(format_step(step, tally))

    def write_legend(self, names: Iterable[str]) -> None:
        self.legend.write(format_legend(names))

    def write_columns(self, names: Iterable[str]) -> None:
        path = self.folder / COLUMNS_FILE
        try:
            with open(path, "w", encoding="utf-8") as fh:
                fh.write(format_legend(names))
        except OSError as e:
            logs.error(f"[Ledger] cannot write {path}: {e}")
            raise StreamOpenError(path, e.strerror or str(e)) from e

    def flush(self) -> None:
        for fh in (self.time, self.profiling, self.legend):
            fh.flush()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._stack.close()
        logs.debug(f"[Ledger] closed output files in {self.folder}")
