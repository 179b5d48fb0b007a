#!filepath: steplog/cli.py
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.table import Table

from steplog import logs, init_logging, __version__
from steplog.analysis.loader import load_profiling, load_totals
from steplog.analysis.plot import ProfilingPlot
from steplog.config.app_config import AppConfig
from steplog.observability.writers import COLUMNS_FILE, LEDGER_FILES, PROFILING_FILE
from steplog.utils.errors import ProfilingFormatError
from steplog.utils.filesystem import FileSystem

app = typer.Typer(help="steplog: per-step solver timing ledger tools")


def _fail(msg: str) -> None:
    print(f"[red]{msg}[/red]")
    raise typer.Exit(code=1)


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="steplog.yml (log sinks, ledger defaults)"
    ),
):
    """
    --config 指定时按 AppConfig.log 重新配置日志
    """
    if config is not None:
        cfg = AppConfig.load(str(config))
        init_logging(cfg.log)
        logs.debug(f"[CLI] loaded config {config}")


@logs.catch("summary failed")
def build_summary_table(case_dir: Path) -> Table:
    totals = load_totals(case_dir)

    means = None
    if (case_dir / PROFILING_FILE).exists():
        profiling = load_profiling(case_dir)
        if len(profiling):
            means = profiling.mean()

    grand = float(totals.sum())

    table = Table(title=f"Timing summary: {case_dir}")
    table.add_column("Event")
    table.add_column("Total (s)", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Mean/step (s)", justify="right")

    for name, sec in totals.items():
        share = f"{100.0 * sec / grand:.1f}%" if grand > 0 else "-"
        mean = f"{means[name]:.6f}" if means is not None and name in means else "-"
        table.add_row(str(name), f"{sec:.4f}", share, mean)

    table.add_section()
    table.add_row("TOTAL", f"{grand:.4f}", "100.0%" if grand > 0 else "-", "")
    return table


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def summary(case_dir: Path):
    """
    打印 case 目录下 time / profiling 的汇总表
    """
    try:
        table = build_summary_table(case_dir)
    except (FileNotFoundError, ProfilingFormatError) as e:
        _fail(str(e))
    print(table)


@app.command()
def plot(
    case_dir: Path,
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="PNG output path"),
):
    """
    把 profiling 画成每个 event 的耗时曲线
    """
    target = out or case_dir / "profiling.png"
    try:
        df = load_profiling(case_dir)
    except (FileNotFoundError, ProfilingFormatError) as e:
        _fail(str(e))

    ProfilingPlot(target).render(df, title=f"Time per step: {case_dir.name}")
    print(f"[green]Wrote {target}[/green]")


@app.command()
def clean(case_dir: Path):
    """
    删除 case 目录下的 ledger 输出（time / profiling / profiling_legend / profiling_columns）
    """
    removed = FileSystem.remove_files(case_dir, LEDGER_FILES + (COLUMNS_FILE,))
    print(f"[yellow]Removed {removed} file(s) from {case_dir}[/yellow]")


if __name__ == "__main__":
    app()

# python -m steplog.cli summary path/to/case
