#!filepath: tests/observability/test_writers.py
from pathlib import Path

import pytest

from steplog.observability.tally import Tally
from steplog.observability.writers import (
    LEDGER_FILES,
    LedgerFiles,
    fmt_value,
    format_legend,
    format_step,
    format_totals,
)
from steplog.utils.errors import StreamOpenError


@pytest.fixture
def tally() -> Tally:
    t = Tally()
    t.add("convection", 0.125)
    t.add("poisson", 3.0)
    return t


def test_file_names_are_fixed():
    assert LEDGER_FILES == ("time", "profiling", "profiling_legend")


def test_fmt_value_six_significant_digits():
    assert fmt_value(0.0) == "0"
    assert fmt_value(2.0) == "2"
    assert fmt_value(0.0501234567) == "0.0501235"
    assert fmt_value(1234567.0) == "1.23457e+06"


def test_format_totals(tally):
    assert format_totals(tally) == "convection 0.125\npoisson 3\n"


def test_format_totals_empty():
    assert format_totals(Tally()) == ""


def test_format_step(tally):
    assert format_step(7, tally) == "7\t0.125\t3\t\n"


def test_format_step_no_events():
    assert format_step(3, Tally()) == "3\t\n"


def test_format_legend(tally):
    assert format_legend(tally.names()) == "convection\npoisson\n"


def test_ledger_files_write_and_close(tmp_path: Path, tally):
    files = LedgerFiles(tmp_path)
    files.write_totals(tally)
    files.write_step(1, tally)
    files.write_legend(tally.names())
    files.close()
    files.close()

    assert files.closed
    assert (tmp_path / "time").read_text() == "convection 0.125\npoisson 3\n"
    assert (tmp_path / "profiling").read_text() == "1\t0.125\t3\t\n"
    assert (tmp_path / "profiling_legend").read_text() == "convection\npoisson\n"


def test_ledger_files_truncate_previous_run(tmp_path: Path, tally):
    (tmp_path / "time").write_text("stale 99\n")

    files = LedgerFiles(tmp_path)
    files.close()

    assert (tmp_path / "time").read_text() == ""


def test_ledger_files_line_buffered(tmp_path: Path, tally):
    files = LedgerFiles(tmp_path)
    files.write_step(1, tally)

    # 行缓冲：未 close 也能读到
    assert (tmp_path / "profiling").read_text() == "1\t0.125\t3\t\n"
    files.close()


def test_partial_open_failure_closes_opened_files(tmp_path: Path):
    # profiling 是目录 -> 第二个文件打开失败
    (tmp_path / "profiling").mkdir()

    with pytest.raises(StreamOpenError) as exc:
        LedgerFiles(tmp_path)

    assert exc.value.path == tmp_path / "profiling"
    assert isinstance(exc.value.__cause__, OSError)
