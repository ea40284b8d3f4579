from __future__ import annotations
import csv
import os
import statistics
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .annealing import SAConfig, SimulatedAnnealing
from .branch_and_bound import solve_branch_and_bound
from .exhaustive import solve_exhaustive
from .result import SolveResult
from .tsp import TSPInstance


def _solve_annealing(instance: TSPInstance, cfg: Optional[SAConfig] = None) -> SolveResult:
    _, result = SimulatedAnnealing(instance, cfg).run()
    return result


SOLVERS: Dict[str, Callable[..., SolveResult]] = {
    "exhaustive": solve_exhaustive,
    "branch-and-bound": solve_branch_and_bound,
    "simulated-annealing": _solve_annealing,
}


def get_solver(name: str) -> Callable[..., SolveResult]:
    key = name.lower()
    if key not in SOLVERS:
        raise ValueError(f"Unknown solver {name}")
    return SOLVERS[key]


def solve(instance: TSPInstance, name: str, cfg: Optional[SAConfig] = None,
          bound: str = "mst") -> SolveResult:
    solver = get_solver(name)
    if solver is _solve_annealing:
        return solver(instance, cfg)
    if solver is solve_branch_and_bound:
        return solver(instance, bound=bound)
    return solver(instance)


def compare_solvers(instance: TSPInstance, names: Sequence[str], cfg: Optional[SAConfig] = None,
                    bound: str = "mst", csv_path: Optional[str] = None) -> List[Dict[str, Any]]:
    """Run each named solver once on the same instance; one row per solver."""
    rows = []
    for name in names:
        res = solve(instance, name, cfg, bound=bound)
        row = {"solver": res.solver, "n_cities": instance.n_cities(), "cost": res.cost,
               "elapsed_sec": res.elapsed_sec, "tour": " ".join(map(str, res.tour))}
        rows.append(row)
        if csv_path is not None:
            write_header = not os.path.exists(csv_path)
            with open(csv_path, "a", newline="") as f:
                w = csv.DictWriter(f, fieldnames=row.keys())
                if write_header:
                    w.writeheader()
                w.writerow(row)
    return rows


def run_repeated_trials(instance: TSPInstance, cfg: SAConfig, n_runs: int = 10, base_seed: int = 42):
    lengths = []
    times = []
    best_tours = []
    for r in range(n_runs):
        cfg_r = SAConfig(**{**asdict(cfg), "seed": base_seed + r})
        res = _solve_annealing(instance, cfg_r)
        lengths.append(res.cost)
        times.append(res.elapsed_sec)
        best_tours.append(res.tour)
    stats = {
        "mean_length": statistics.mean(lengths),
        "std_length": statistics.stdev(lengths) if len(lengths) > 1 else 0.0,
        "min_length": min(lengths),
        "max_length": max(lengths),
        "median_length": statistics.median(lengths),
        "mean_time": statistics.mean(times),
        "solver": "simulated-annealing",
        "n_runs": n_runs,
    }
    details: List[Tuple[float, float, List[int]]] = list(zip(lengths, times, best_tours))
    return stats, details
