"""
Population handling for the tour search.

A population behaves like a set: every member is a distinct permutation of the
town indices. Membership is tracked through a set of tuple keys so duplicate
checks stay constant time as the population grows.
"""

import random
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from .tours.base import Tour, tour_key
from .tours.operators import mutate, pairwise_crossover


class PopulationError(RuntimeError):
    """Raised when the population cannot be bred back up to size."""


class Population:
    def __init__(self, members: Iterable[Tour] = ()):
        self.members: List[Tour] = []
        self._keys = set()
        for m in members:
            self.add(m)

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[Tour]:
        return iter(self.members)

    def __getitem__(self, idx: int) -> Tour:
        return self.members[idx]

    def __contains__(self, tour) -> bool:
        return tour_key(tour) in self._keys

    def add(self, tour: Tour) -> bool:
        key = tour_key(tour)
        if key in self._keys:
            return False
        self._keys.add(key)
        self.members.append(list(tour))
        return True

    def replace(self, idx: int, tour: Tour) -> bool:
        key = tour_key(tour)
        if key in self._keys:
            return False
        self._keys.discard(tour_key(self.members[idx]))
        self._keys.add(key)
        self.members[idx] = list(tour)
        return True

    def shuffle(self, rng: random.Random) -> None:
        rng.shuffle(self.members)


def estimate_permutations(n: int, cap: int) -> int:
    """
    Number of distinct tours over n towns, capped at ``cap``.

    The running product over 2..n stops as soon as it reaches the cap, so the
    full factorial is never computed for large n.
    """
    count = 1
    for i in range(2, n + 1):
        count *= i
        if count >= cap:
            return cap
    return min(count, cap)


def initial_population(n: int, target: int, rng: random.Random) -> Population:
    size = estimate_permutations(n, target)
    population = Population()
    base = list(range(n))
    while len(population) < size:
        member = base[:]
        rng.shuffle(member)
        population.add(member)
    return population


INSUFFICIENT_PARENTS = "insufficient_parents"
STALLED = "stalled"


@dataclass
class RefillResult:
    added: int
    error: Optional[str] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


def refill_to_target(
    population: Population,
    target: int,
    rng: random.Random,
    policy: str = "uniform",
    max_attempts: Optional[int] = None,
) -> RefillResult:
    if len(population) >= target:
        return RefillResult(added=0)
    if len(population) < 2:
        return RefillResult(
            added=0,
            error=INSUFFICIENT_PARENTS,
            message=f"cannot breed from {len(population)} member(s); at least two are required",
        )
    if max_attempts is None:
        max_attempts = 1000 * target
    parents = list(population.members)
    rng.shuffle(parents)
    added = 0
    attempts = 0
    i = 0
    while len(population) < target:
        if attempts >= max_attempts:
            return RefillResult(
                added=added, error=STALLED, message=f"population stuck at {len(population)} after {attempts} crossovers"
            )
        child = pairwise_crossover(parents[i], parents[i + 1], rng, policy)
        attempts += 1
        if population.add(child):
            added += 1
        i += 2
        if i >= len(parents) - 1:
            rng.shuffle(parents)
            i = 0
    return RefillResult(added=added)


def mutate_population(population: Population, rng: random.Random) -> int:
    population.shuffle(rng)
    replaced = 0
    for i in range(len(population) // 2):
        candidate = mutate(population[i], rng)
        if population.replace(i, candidate):
            replaced += 1
    return replaced
