from .log_config import LogConfig
from .ledger_config import LedgerConfig
from .sim_params import SimParams, LinearSolverConfig
from .app_config import AppConfig

__all__ = ["LogConfig", "LedgerConfig", "SimParams", "LinearSolverConfig", "AppConfig"]
