import random
from dataclasses import asdict, dataclass, field, replace
from typing import Callable, Dict, List, Optional

from .data import TownSet
from .evaluation import BACKENDS, evaluate_population, select_survivors
from .population import (
    INSUFFICIENT_PARENTS,
    Population,
    PopulationError,
    RefillResult,
    initial_population,
    mutate_population,
    refill_to_target,
)
from .tours.base import Tour
from .tours.operators import CUT_POLICIES


RUNNING = "running"
TERMINATED = "terminated"


@dataclass
class EvolutionConfig:
    population_size: int = 100
    survivor_fraction: float = 0.5
    patience: int = 50
    max_generations: int = 10_000
    crossover_cuts: str = "uniform"
    backend: str = "torch"
    random_seed: Optional[int] = None

    def validate(self) -> "EvolutionConfig":
        if self.population_size < 1:
            raise ValueError("population_size must be at least 1")
        if not 0.0 < self.survivor_fraction <= 1.0:
            raise ValueError("survivor_fraction must be in (0, 1]")
        if self.patience < 0:
            raise ValueError("patience must be non-negative")
        if self.max_generations < 1:
            raise ValueError("max_generations must be at least 1")
        if self.crossover_cuts not in CUT_POLICIES:
            raise ValueError(f"crossover_cuts must be one of {CUT_POLICIES}")
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}")
        return self

    @classmethod
    def from_preset(cls, name: str, **overrides) -> "EvolutionConfig":
        if name not in PRESETS:
            raise ValueError(f"Unknown preset {name!r}; expected one of {sorted(PRESETS)}")
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(PRESETS[name], **overrides).validate()

    def to_state(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_state(cls, state: Dict) -> "EvolutionConfig":
        return cls(**state).validate()


PRESETS: Dict[str, EvolutionConfig] = {
    "reference": EvolutionConfig(),
    "third-biased": EvolutionConfig(crossover_cuts="thirds"),
    "quick": EvolutionConfig(population_size=30, patience=20, max_generations=500),
}


@dataclass
class SearchResult:
    tour: Tour
    fitness: float
    generations: int
    found_at: int
    reason: str
    history: List[float] = field(default_factory=list)

    def to_state(self) -> Dict:
        return asdict(self)


class EvolutionarySearch:
    """
    Genetic search for the shortest open path through a town set.

    Each call to :meth:`step` runs one generation: score, keep the best
    fraction, record improvement or check stagnation, breed back to size and
    mutate. :meth:`run` steps until the search terminates.
    """

    def __init__(self, config: EvolutionConfig, towns: TownSet, rng: random.Random = None):
        self.cfg = config.validate()
        self.towns = towns
        self.rng = rng or random.Random(config.random_seed)
        self.population: Population = initial_population(len(towns), config.population_size, self.rng)
        # Small town counts cannot fill the configured size.
        self.target_size = len(self.population)
        # Two survivors are the minimum that can still breed.
        self.keep = min(self.target_size, max(2, int(self.target_size * config.survivor_fraction)))
        self.dist_mat = towns.distance_matrix() if config.backend == "torch" else None
        self.state = RUNNING
        self.reason: Optional[str] = None
        self.generation = 0
        self.best_tour: Optional[Tour] = None
        self.best_score: Optional[float] = None
        self.found_at = 0
        self.history: List[float] = []
        self.last_refill: Optional[RefillResult] = None

    @property
    def running(self) -> bool:
        return self.state == RUNNING

    def _terminate(self, reason: str) -> None:
        self.state = TERMINATED
        self.reason = reason

    def step(self) -> None:
        if not self.running:
            return
        gen = self.generation
        scores = evaluate_population(
            self.towns, self.population.members, backend=self.cfg.backend, dist_mat=self.dist_mat
        )
        survivors, ranked = select_survivors(self.population.members, scores, self.keep)
        top_idx, top_score = ranked[0]
        improved = self.best_score is None or top_score < self.best_score
        if improved:
            self.best_tour = list(self.population[top_idx])
            self.best_score = top_score
            self.found_at = gen
        self.history.append(self.best_score)
        if not improved and gen > self.found_at + self.cfg.patience:
            self._terminate("stagnation")
            return

        self.population = Population(survivors)
        self.last_refill = refill_to_target(
            self.population, self.target_size, self.rng, policy=self.cfg.crossover_cuts
        )
        if self.last_refill.error == INSUFFICIENT_PARENTS:
            raise PopulationError(self.last_refill.message)
        mutate_population(self.population, self.rng)

        self.generation += 1
        if self.generation >= self.cfg.max_generations:
            self._terminate("max_generations")

    def run(self, on_generation: Callable[["EvolutionarySearch", int], None] = None) -> SearchResult:
        while self.running:
            gen = self.generation
            self.step()
            if on_generation is not None:
                on_generation(self, gen)
        return self.result()

    def result(self) -> SearchResult:
        if self.best_tour is None:
            raise RuntimeError("Search has not scored any generation yet")
        return SearchResult(
            tour=list(self.best_tour),
            fitness=self.best_score,
            generations=self.generation,
            found_at=self.found_at,
            reason=self.reason or RUNNING,
            history=list(self.history),
        )
