from .tsp import Point, TSPInstance, distance, tour_length
from .result import SolveResult
from .exhaustive import solve_exhaustive
from .branch_and_bound import solve_branch_and_bound
from .annealing import SAConfig, SearchState, HistorySample, SimulatedAnnealing, steps_per_frame
from .experiments import get_solver, solve, compare_solvers, run_repeated_trials
