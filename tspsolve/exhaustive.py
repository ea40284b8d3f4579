from __future__ import annotations
import itertools
import logging
import math
import time

from .result import SolveResult
from .tsp import TSPInstance

logger = logging.getLogger(__name__)


def solve_exhaustive(instance: TSPInstance) -> SolveResult:
    """Score every permutation of the cities and keep the shortest tour.

    Rotations and mirror images are enumerated as distinct tours, so the work is
    N! tour evaluations. Only practical for roughly ten cities or fewer; no
    limit is enforced here. Ties keep the first permutation in lexicographic
    order.
    """
    start = time.time()
    n = instance.n_cities()
    D = instance.distance_matrix().tolist()
    logger.info("exhaustive search over %d cities (%d tours)", n, math.factorial(n))

    best_tour = None
    best_length = math.inf
    count = 0
    for perm in itertools.permutations(range(n)):
        count += 1
        L = 0.0
        for k in range(n):
            L += D[perm[k]][perm[(k + 1) % n]]
        if L < best_length:
            best_length = L
            best_tour = perm

    elapsed = time.time() - start
    logger.info("exhaustive search done: length=%.4f after %d tours in %.3fs",
                best_length, count, elapsed)
    return SolveResult(tour=list(best_tour), cost=best_length, solver="exhaustive",
                       elapsed_sec=elapsed, stats={"permutations": count})
