from __future__ import annotations
import logging
import math
import random
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .result import SolveResult
from .tsp import TSPInstance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SAConfig:
    t0: float = 1500.0            # initial temperature
    cooling_rate: float = 0.995   # multiplicative per iteration
    max_iterations: int = 2000
    steps_per_batch: int = 1      # default count for step_batch
    seed: Optional[int] = None

    def validate(self) -> None:
        if not self.t0 > 0:
            raise ValueError(f"t0 must be > 0, got {self.t0}")
        if not 0 < self.cooling_rate < 1:
            raise ValueError(f"cooling_rate must be in (0, 1), got {self.cooling_rate}")
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be > 0, got {self.max_iterations}")
        if self.steps_per_batch <= 0:
            raise ValueError(f"steps_per_batch must be > 0, got {self.steps_per_batch}")

    def temperature(self, iteration: int) -> float:
        return self.t0 * self.cooling_rate ** iteration


@dataclass(frozen=True)
class HistorySample:
    iteration: int
    current_cost: float
    best_cost: float
    temperature: float


@dataclass(frozen=True, eq=False)
class SearchState:
    current_tour: Tuple[int, ...]
    current_cost: float
    best_tour: Tuple[int, ...]
    best_cost: float
    iteration: int
    temperature: float
    max_iterations: int
    history_len: int = 0
    accepted: int = 0
    # append-only; shared by successive snapshots, each sees its first history_len entries
    _log: List[HistorySample] = field(default_factory=list, repr=False)

    @property
    def history(self) -> Tuple[HistorySample, ...]:
        return tuple(self._log[:self.history_len])

    def _key(self):
        return (self.current_tour, self.current_cost, self.best_tour, self.best_cost,
                self.iteration, self.temperature, self.max_iterations, self.history_len,
                self.accepted)

    def __eq__(self, other):
        if not isinstance(other, SearchState):
            return NotImplemented
        return self._key() == other._key() and self.history == other.history

    def __hash__(self):
        return hash(self._key())

    @property
    def is_complete(self) -> bool:
        return self.iteration >= self.max_iterations


def steps_per_frame(iterations_per_second: float, fps: float = 30.0) -> int:
    """Steps to advance on each tick of a driver running at ``fps``."""
    return max(1, math.ceil(iterations_per_second / fps))


class SimulatedAnnealing:
    """Steppable simulated annealing over random two-city swaps.

    The engine holds the problem, the configuration and the random source. Search
    progress lives in immutable ``SearchState`` snapshots: ``step`` and
    ``step_batch`` take a state and return the next one, so a driver decides
    when (and whether) to advance. One engine and its states must not be stepped
    from several threads at once.
    """

    def __init__(self, instance: TSPInstance, cfg: Optional[SAConfig] = None,
                 rng: Optional[random.Random] = None):
        cfg = cfg or SAConfig()
        cfg.validate()
        self.instance = instance
        self.n = instance.n_cities()
        self.cfg = cfg
        self.rng = rng if rng is not None else random.Random(cfg.seed)

    def initialize(self) -> SearchState:
        tour = tuple(range(self.n))
        L = self.instance.tour_length(tour)
        return SearchState(current_tour=tour, current_cost=L, best_tour=tour, best_cost=L,
                           iteration=0, temperature=self.cfg.t0,
                           max_iterations=self.cfg.max_iterations)

    def is_complete(self, state: SearchState) -> bool:
        return state.is_complete

    def _propose(self, tour: Tuple[int, ...]) -> Tuple[int, ...]:
        if self.n == 0:
            return tour
        a = self.rng.randrange(self.n)
        b = self.rng.randrange(self.n)
        proposed = list(tour)
        proposed[a], proposed[b] = proposed[b], proposed[a]
        return tuple(proposed)

    def _accept(self, delta: float, temp: float) -> bool:
        if delta < 0:
            return True
        if temp <= 0.0:
            # cooled to 0.0: reject everything but still consume the draw
            self.rng.random()
            return False
        return self.rng.random() < math.exp(-delta / temp)

    def _advance(self, state: SearchState, count: int) -> SearchState:
        current, current_cost = state.current_tour, state.current_cost
        best, best_cost = state.best_tour, state.best_cost
        accepted = state.accepted
        log = state._log
        if len(log) != state.history_len:
            # stepping an older snapshot again; branch off a private copy
            log = log[:state.history_len]

        for k in range(state.iteration, state.iteration + count):
            temp = self.cfg.temperature(k)
            candidate = self._propose(current)
            candidate_cost = self.instance.tour_length(candidate)
            before = current_cost
            if self._accept(candidate_cost - current_cost, temp):
                current, current_cost = candidate, candidate_cost
                accepted += 1
                if current_cost < best_cost:
                    best, best_cost = current, current_cost
            log.append(HistorySample(iteration=k, current_cost=before,
                                     best_cost=best_cost, temperature=temp))

        iteration = state.iteration + count
        return SearchState(current_tour=current, current_cost=current_cost,
                           best_tour=best, best_cost=best_cost,
                           iteration=iteration, temperature=self.cfg.temperature(iteration),
                           max_iterations=state.max_iterations,
                           history_len=len(log), accepted=accepted, _log=log)

    def step(self, state: SearchState) -> SearchState:
        """One iteration; a completed state is returned unchanged."""
        if state.is_complete:
            return state
        return self._advance(state, 1)

    def step_batch(self, state: SearchState, count: Optional[int] = None) -> SearchState:
        """Same result as ``count`` calls to ``step``, clamped at ``max_iterations``."""
        if count is None:
            count = self.cfg.steps_per_batch
        count = min(count, state.max_iterations - state.iteration)
        if count <= 0:
            return state
        return self._advance(state, count)

    def run(self, state: Optional[SearchState] = None) -> Tuple[SearchState, SolveResult]:
        start = time.time()
        state = state if state is not None else self.initialize()
        logger.info("simulated annealing on %d cities: t0=%g, cooling_rate=%g, max_iterations=%d",
                    self.n, self.cfg.t0, self.cfg.cooling_rate, state.max_iterations)
        while not state.is_complete:
            state = self.step_batch(state)
            logger.debug("iteration %d: current=%.4f best=%.4f T=%.4g",
                         state.iteration, state.current_cost, state.best_cost, state.temperature)
        elapsed = time.time() - start
        logger.info("simulated annealing done: best=%.4f after %d iterations (%d accepted) in %.3fs",
                    state.best_cost, state.iteration, state.accepted, elapsed)
        result = SolveResult(tour=list(state.best_tour), cost=state.best_cost,
                             solver="simulated-annealing", elapsed_sec=elapsed,
                             stats={"iterations": state.iteration, "accepted": state.accepted})
        return state, result
