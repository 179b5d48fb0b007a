#!filepath: steplog/observability/tally.py
from __future__ import annotations

from typing import Dict, Iterator, List, Tuple


class Tally:
    """
    有序累加器：event name -> float

    - 未出现过的 name 读出 0.0（不插入）
    - add() 首次出现时插入到末尾
    - 迭代顺序 = 首次插入顺序
    """

    def __init__(self):
        self._values: Dict[str, float] = {}

    def get(self, name: str) -> float:
        return self._values.get(name, 0.0)

    def touch(self, name: str) -> None:
        self._values.setdefault(name, 0.0)

    def add(self, name: str, delta: float) -> float:
        value = self._values.get(name, 0.0) + delta
        self._values[name] = value
        return value

    def erase(self, name: str) -> None:
        self._values.pop(name, None)

    def reset(self) -> None:
        for name in self._values:
            self._values[name] = 0.0

    def total(self) -> float:
        return sum(self._values.values())

    def names(self) -> List[str]:
        return list(self._values)

    def values(self) -> List[float]:
        return list(self._values.values())

    def items(self) -> List[Tuple[str, float]]:
        return list(self._values.items())

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Tally({self._values!r})"
