from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class SolveResult:
    tour: List[int]
    cost: float
    solver: str
    elapsed_sec: float = 0.0
    stats: Dict[str, Any] = field(default_factory=dict)
