#!filepath: steplog/config/sim_params.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from steplog import logs


class LinearSolverConfig(BaseModel):
    """
    一个线性系统的求解器设定（opaque，ledger 不解释这些值）
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    system: str
    solver: str = "CG"
    preconditioner: str = "DIAGONAL"
    abs_tolerance: float = Field(1e-5, alias="absTolerance")
    rel_tolerance: float = Field(0.0, alias="relTolerance")
    max_iterations: int = Field(10000, alias="maxIterations", ge=1)


class SimParams(BaseModel):
    """
    simParams.yaml（FROZEN schema）

    语义：
      - 求解器的运行参数，纯声明式
      - ledger 只关心 nt / nsave / startStep（决定 flush 节奏）
      - 其它字段原样保留，不做解释
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    dt: float
    scale_cv: float = Field(2.0, alias="scaleCV")
    nt: int = Field(..., ge=0)
    nsave: int = Field(..., ge=1)
    start_step: int = Field(0, alias="startStep", ge=0)
    time_scheme: List[str] = Field(default_factory=list, alias="timeScheme")
    ibm_scheme: Optional[str] = Field(None, alias="ibmScheme")
    interpolation_type: Optional[str] = Field(None, alias="interpolationType")
    linear_solvers: List[LinearSolverConfig] = Field(
        default_factory=list, alias="linearSolvers"
    )

    @property
    def last_step(self) -> int:
        return self.start_step + self.nt

    def solver_for(self, system: str) -> LinearSolverConfig:
        for s in self.linear_solvers:
            if s.system == system:
                return s
        raise KeyError(f"no linear solver configured for system '{system}'")

    @classmethod
    def load(cls, path: str | Path) -> "SimParams":
        """
        读取 simParams.yaml

        文件顶层可以是：
          - list（取第一个 mapping，legacy 格式）
          - mapping
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"simParams file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)

        if isinstance(raw, list):
            if not raw:
                raise ValueError(f"simParams file is empty: {path}")
            raw = raw[0]

        if not isinstance(raw, dict):
            raise ValueError(
                f"simParams must be a mapping or a list of mappings, got {type(raw).__name__}"
            )

        params = cls(**raw)
        logs.debug(
            f"[SimParams] {path} nt={params.nt} nsave={params.nsave} "
            f"startStep={params.start_step}"
        )
        return params
