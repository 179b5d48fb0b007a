#!filepath: steplog/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .log_config import LogConfig
from .ledger_config import LedgerConfig

DEFAULT_CONFIG_NAME = "steplog.yml"


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env
        - 默认使用 <cwd>/steplog.yml
        - 环境变量覆盖：
            STEPLOG_LOG_LEVEL  -> log.level
            STEPLOG_OUTPUT_DIR -> ledger.output_dir
        """
        # 1) 先加载 .env（当前工作目录）
        load_dotenv(os.path.join(os.getcwd(), ".env"))

        # 2) 决定配置文件路径
        if path is None:
            path = os.path.join(os.getcwd(), DEFAULT_CONFIG_NAME)

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        # 3) 读取 YAML
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        # 4) env 覆盖
        level = os.getenv("STEPLOG_LOG_LEVEL")
        if level:
            raw.setdefault("log", {})["level"] = level

        output_dir = os.getenv("STEPLOG_OUTPUT_DIR")
        if output_dir:
            raw.setdefault("ledger", {})["output_dir"] = output_dir

        return cls(**raw)
