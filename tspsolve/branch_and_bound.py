from __future__ import annotations
import logging
import math
import time
from typing import Callable, Dict, List, Set

from .result import SolveResult
from .tsp import TSPInstance

logger = logging.getLogger(__name__)

ANCHOR = 0

BoundFn = Callable[[List[List[float]], List[int], Set[int]], float]


def _path_length(D: List[List[float]], path: List[int]) -> float:
    total = 0.0
    for k in range(len(path) - 1):
        total += D[path[k]][path[k + 1]]
    return total


def nearest_neighbor_bound(D: List[List[float]], path: List[int], visited: Set[int]) -> float:
    """Partial path plus a greedy nearest-neighbour walk through the unvisited cities.

    The return edge to the anchor is left out. The greedy walk can be longer than
    the best completion, so this is not a true lower bound and may prune the
    optimum.
    """
    bound = _path_length(D, path)
    current = path[-1]
    remaining = [c for c in range(len(D)) if c not in visited]
    while remaining:
        nearest = min(remaining, key=lambda c: D[current][c])
        bound += D[current][nearest]
        current = nearest
        remaining.remove(nearest)
    return bound


def mst_bound(D: List[List[float]], path: List[int], visited: Set[int]) -> float:
    """Partial path plus a minimum spanning tree over {last, unvisited, anchor}.

    Any completion is a Hamiltonian path from the last city through the unvisited
    ones back to the anchor, i.e. a spanning tree of that set, so this never
    overestimates.
    """
    bound = _path_length(D, path)
    nodes = [path[-1]] + [c for c in range(len(D)) if c not in visited]
    if path[-1] != ANCHOR:
        nodes.append(ANCHOR)
    # Prim's algorithm, O(m^2) on the remaining nodes
    key = {c: D[nodes[0]][c] for c in nodes[1:]}
    while key:
        c = min(key, key=key.get)
        bound += key.pop(c)
        for o in key:
            if D[c][o] < key[o]:
                key[o] = D[c][o]
    return bound


BOUNDS: Dict[str, BoundFn] = {
    "mst": mst_bound,
    "nearest_neighbor": nearest_neighbor_bound,
}


def solve_branch_and_bound(instance: TSPInstance, bound: str = "mst") -> SolveResult:
    """Depth-first search over partial tours anchored at city 0.

    Unvisited cities are branched in increasing index order. A branch is dropped
    when its bound is >= the incumbent length; a complete tour only replaces the
    incumbent when strictly shorter. ``bound="nearest_neighbor"`` reproduces the
    greedy completion heuristic, which is faster but not guaranteed exact.
    """
    if bound not in BOUNDS:
        raise ValueError(f"Unknown bound {bound!r}; expected one of {sorted(BOUNDS)}")
    bound_fn = BOUNDS[bound]

    start = time.time()
    n = instance.n_cities()
    if n == 0:
        return SolveResult(tour=[], cost=0.0, solver="branch-and-bound", elapsed_sec=0.0,
                           stats={"nodes_explored": 0, "pruned": 0, "bound": bound})

    D = instance.distance_matrix().tolist()
    logger.info("branch and bound over %d cities (bound=%s)", n, bound)

    best_tour = list(range(n))
    best_length = math.inf
    nodes_explored = 0
    pruned = 0

    def dfs(path: List[int], visited: Set[int]) -> None:
        nonlocal best_tour, best_length, nodes_explored, pruned
        nodes_explored += 1

        if len(path) == n:
            L = _path_length(D, path) + D[path[-1]][path[0]]
            if L < best_length:
                best_length = L
                best_tour = list(path)
                logger.debug("new incumbent %.4f: %s", L, best_tour)
            return

        if bound_fn(D, path, visited) >= best_length:
            pruned += 1
            return

        for city in range(n):
            if city in visited:
                continue
            visited.add(city)
            path.append(city)
            dfs(path, visited)
            path.pop()
            visited.remove(city)

    dfs([ANCHOR], {ANCHOR})

    elapsed = time.time() - start
    logger.info("branch and bound done: length=%.4f, %d nodes, %d pruned in %.3fs",
                best_length, nodes_explored, pruned, elapsed)
    return SolveResult(tour=best_tour, cost=best_length, solver="branch-and-bound",
                       elapsed_sec=elapsed,
                       stats={"nodes_explored": nodes_explored, "pruned": pruned, "bound": bound})
