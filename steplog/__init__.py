#!filepath: steplog/__init__.py

__version__ = "0.1.0"

from .utils.logger import Logging, logs, init_logging
from .utils.filesystem import FileSystem
from .config.app_config import AppConfig
from .config.sim_params import SimParams
from .observability.ledger import Ledger, NoOpLedger, LedgerState
from .observability.step_loop import StepLoop

# alias 简化调用
fs = FileSystem

__all__ = [
    "logs", "Logging", "init_logging",
    "fs",
    "AppConfig", "SimParams",
    "Ledger", "NoOpLedger", "LedgerState",
    "StepLoop",
]
