#!filepath: steplog/config/ledger_config.py
from typing import Optional

from pydantic import BaseModel


class LedgerConfig(BaseModel):
    """
    Ledger 运行期开关：
    - output_dir : case 目录（time / profiling / profiling_legend 写在这里）
    - print_now  : StepLoop 结束时打印汇总表（print_all_time）
    - enabled    : False -> NoOpLedger（非主进程）
    """

    output_dir: Optional[str] = None
    print_now: bool = False
    enabled: bool = True
