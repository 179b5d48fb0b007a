# tests/conftest.py
from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)  # or sys.stderr
    yield


class FakeClock:
    """可手动推进的时钟，timer 测试不依赖真实 sleep"""

    def __init__(self, start: float = 1000.0):
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def console():
    """收集 ledger 的终端输出"""
    lines: list[str] = []
    return lines


@pytest.fixture
def case_dir(tmp_path: Path) -> Path:
    d = tmp_path / "case"
    d.mkdir()
    return d


@pytest.fixture
def sim_params_file(tmp_path: Path) -> Path:
    p = tmp_path / "simParams.yaml"
    p.write_text(
        """# simParams.yaml

- dt: 0.0005
  scaleCV: 5.0
  nt: 6
  nsave: 3
  startStep: 0
  timeScheme: [EULER_EXPLICIT, EULER_IMPLICIT]
  ibmScheme: DIRECT_FORCING
  interpolationType: LINEAR
  linearSolvers:
    - system: velocity
      solver: BICGSTAB
      preconditioner: DIAGONAL
      absTolerance: 1.0E-08
      relTolerance: 0.0
      maxIterations: 10000
    - system: Poisson
      solver: CG
      preconditioner: SMOOTHED_AGGREGATION
      absTolerance: 1.0E-08
      relTolerance: 0.0
      maxIterations: 20000
""",
        encoding="utf-8",
    )
    return p
