# steplog/utils/errors.py
from pathlib import Path


class LedgerError(RuntimeError):
    """
    Base class for every failure raised by the instrumentation ledger.
    """


class StreamOpenError(LedgerError):
    """
    One of the ledger output files (time / profiling / profiling_legend)
    could not be created. Fatal at construction.
    """

    def __init__(self, path: Path, reason: str = ""):
        self.path = Path(path)
        msg = f"cannot open ledger output file: {self.path}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class UnstartedTimerError(LedgerError, KeyError):
    """
    stop_timer(event) was called without an outstanding start_timer(event).
    """

    def __init__(self, event: str):
        self.event = event
        super().__init__(f"timer '{event}' was stopped but never started")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class LedgerClosedError(LedgerError):
    """
    Call on a ledger after close().
    """


class ProfilingFormatError(ValueError):
    """
    profiling / profiling_legend files are inconsistent with each other.
    """
