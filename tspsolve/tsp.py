from __future__ import annotations
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Point:
    id: int
    x: float
    y: float
    label: str = ""


def distance(p: Point, q: Point) -> float:
    return math.hypot(p.x - q.x, p.y - q.y)


def tour_length(tour: Sequence[int], points: Sequence[Point]) -> float:
    """Closed-tour length; the last city connects back to the first."""
    n = len(tour)
    dist = 0.0
    for k in range(n):
        i, j = tour[k], tour[(k + 1) % n]
        dist += distance(points[i], points[j])
    return dist


@dataclass(frozen=True)
class TSPInstance:
    points: Tuple[Point, ...]
    name: str = "euclidean_tsp"
    _matrix: Optional[np.ndarray] = field(default=None, init=False, repr=False, compare=False)

    @staticmethod
    def from_coords(coords: Sequence[Tuple[float, float]], name: str = "euclidean_tsp") -> "TSPInstance":
        points = tuple(Point(id=i, x=float(x), y=float(y), label=f"City {i+1}")
                       for i, (x, y) in enumerate(coords))
        return TSPInstance(points=points, name=name)

    @staticmethod
    def random_euclidean(n: int, seed: Optional[int] = None, square_size: float = 100.0,
                         name: str = "random_euclidean") -> "TSPInstance":
        rng = random.Random(seed)
        coords = [(rng.uniform(0, square_size), rng.uniform(0, square_size)) for _ in range(n)]
        return TSPInstance.from_coords(coords, name=name)

    @property
    def coords(self) -> List[Tuple[float, float]]:
        return [(p.x, p.y) for p in self.points]

    def n_cities(self) -> int:
        return len(self.points)

    def distance(self, i: int, j: int) -> float:
        return distance(self.points[i], self.points[j])

    def distance_matrix(self) -> np.ndarray:
        # cached; the instance itself is immutable
        if self._matrix is None:
            xy = np.asarray(self.coords, dtype=float).reshape(-1, 2)
            diff = xy[:, None, :] - xy[None, :, :]
            D = np.hypot(diff[..., 0], diff[..., 1])
            D.setflags(write=False)
            object.__setattr__(self, "_matrix", D)
        return self._matrix

    def tour_length(self, tour: Sequence[int]) -> float:
        return tour_length(tour, self.points)
