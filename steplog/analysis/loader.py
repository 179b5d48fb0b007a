#!filepath: steplog/analysis/loader.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pandas as pd

from steplog import logs
from steplog.observability.writers import COLUMNS_FILE, LEGEND_FILE, PROFILING_FILE, TIME_FILE
from steplog.utils.errors import ProfilingFormatError


def _read_lines(path: Path) -> List[str]:
    if not path.exists():
        raise FileNotFoundError(f"ledger output not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return [line.rstrip("\n") for line in f]


def load_legend(case_dir: str | Path) -> List[str]:
    """profiling_legend -> 列名列表（顺序即 profiling 的列顺序）"""
    return [line for line in _read_lines(Path(case_dir) / LEGEND_FILE) if line]


def load_totals(case_dir: str | Path) -> pd.Series:
    """
    time -> Series(index=event, values=seconds)

    time 可能被多次 write_time()（checkpoint），同名 event 取最后一次。
    """
    path = Path(case_dir) / TIME_FILE
    totals: Dict[str, float] = {}
    for lineno, line in enumerate(_read_lines(path), start=1):
        if not line.strip():
            continue
        name, sep, value = line.rpartition(" ")
        if not sep:
            raise ProfilingFormatError(f"{path}:{lineno}: expected '<name> <seconds>'")
        try:
            totals[name] = float(value)
        except ValueError as e:
            raise ProfilingFormatError(f"{path}:{lineno}: bad value '{value}'") from e

    series = pd.Series(totals, dtype=float, name="seconds")
    series.index.name = "event"
    return series


def load_columns(case_dir: str | Path) -> List[str]:
    """
    profiling 的真实列名。

    正常情况下就是 legend；erase_timer 之后 ledger 会额外写
    profiling_columns（step tally 顺序），此时以它为准。
    """
    case_dir = Path(case_dir)
    if (case_dir / COLUMNS_FILE).exists():
        return [line for line in _read_lines(case_dir / COLUMNS_FILE) if line]
    return load_legend(case_dir)


def load_profiling(case_dir: str | Path) -> pd.DataFrame:
    """
    profiling + profiling_legend -> DataFrame

    - index   : step
    - columns : legend 中的 event 名（legend 顺序）
    - 某个 event 在 run 中途才出现时，之前的行缺列，补 0.0
    - 某行的列数多于列名数 -> ProfilingFormatError
    - 有 profiling_columns 时按它读列，再丢掉被 erase 的列、按 legend 重排
    """
    case_dir = Path(case_dir)
    legend = load_legend(case_dir)
    columns = load_columns(case_dir)
    path = case_dir / PROFILING_FILE

    steps: List[int] = []
    rows: List[List[float]] = []
    for lineno, line in enumerate(_read_lines(path), start=1):
        cells = [c for c in line.split("\t") if c != ""]
        if not cells:
            continue
        try:
            step = int(cells[0])
            values = [float(c) for c in cells[1:]]
        except ValueError as e:
            raise ProfilingFormatError(f"{path}:{lineno}: {e}") from e

        if len(values) > len(columns):
            raise ProfilingFormatError(
                f"{path}:{lineno}: {len(values)} values but legend has {len(columns)} events "
                f"(an event removed with erase_timer still occupies a column and "
                f"{COLUMNS_FILE} is missing)"
            )
        values += [0.0] * (len(columns) - len(values))
        steps.append(step)
        rows.append(values)

    df = pd.DataFrame(rows, columns=columns, index=pd.Index(steps, name="step"), dtype=float)

    if columns != legend:
        unknown = [name for name in legend if name not in columns]
        if unknown:
            raise ProfilingFormatError(
                f"{case_dir}: legend events {unknown} have no column in {COLUMNS_FILE}"
            )
        erased = [name for name in columns if name not in legend]
        logs.warning(f"[Analysis] dropping erased profiling columns {erased} in {case_dir}")
        df = df[legend]

    logs.debug(f"[Analysis] loaded {len(df)} steps x {len(legend)} events from {case_dir}")
    return df
