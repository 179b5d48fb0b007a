#!filepath: steplog/analysis/plot.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

from steplog import logs


class ProfilingPlot:
    """
    profiling DataFrame -> PNG

    每个 event 一条曲线（x = step, y = seconds）。只读消费者，不修改 df。
    """

    def __init__(self, output_path: str | Path):
        self._path = Path(output_path)

    def render(self, df: pd.DataFrame, title: Optional[str] = None) -> Path:
        fig, ax = plt.subplots(figsize=(10, 4))
        for name in df.columns:
            ax.plot(df.index, df[name], label=str(name))
        ax.set_title(title or "Time per step")
        ax.set_xlabel("Time step")
        ax.set_ylabel("Seconds")
        if len(df.columns):
            ax.legend(loc="upper right", fontsize="small")
        fig.tight_layout()
        fig.savefig(self._path)
        plt.close(fig)

        logs.info(f"[Analysis] profiling plot written to {self._path}")
        return self._path
