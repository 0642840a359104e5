import random
from typing import Sequence, Tuple

from .base import Tour


CUT_POLICIES = ("uniform", "thirds")


def cut_points(length: int, rng: random.Random, policy: str = "uniform") -> Tuple[int, int]:
    """
    Draw two cut points ``0 <= idx1 <= idx2 <= length``.

    ``uniform`` spreads both points over the whole tour; ``thirds`` draws idx1
    from the first third and idx2 as an offset within the following third,
    so the copied segment is never longer than a third of the tour.
    """
    if policy == "uniform":
        idx1 = rng.randint(0, length)
        idx2 = rng.randint(idx1, length)
    elif policy == "thirds":
        third = length // 3
        idx1 = rng.randint(0, third)
        idx2 = idx1 + rng.randint(0, third)
    else:
        raise ValueError(f"Unknown cut policy {policy!r}; expected one of {CUT_POLICIES}")
    return idx1, idx2


def ordered_crossover(parent1: Sequence[int], parent2: Sequence[int], idx1: int, idx2: int) -> Tour:
    child = list(parent1[idx1:idx2])
    seen = set(child)
    n = len(parent2)
    i = idx2 % n if n else 0
    while len(child) < n:
        town = parent2[i]
        if town not in seen:
            child.append(town)
            seen.add(town)
        i += 1
        if i >= n:
            i = 0
    return child


def pairwise_crossover(
    parent1: Sequence[int],
    parent2: Sequence[int],
    rng: random.Random,
    policy: str = "uniform",
) -> Tour:
    if len(parent1) != len(parent2):
        raise ValueError("Parents must have the same length")
    idx1, idx2 = cut_points(len(parent1), rng, policy)
    return ordered_crossover(parent1, parent2, idx1, idx2)


def invert_segment(tour: Sequence[int], idx1: int, idx2: int) -> Tour:
    res = list(tour)
    res[idx1:idx2] = reversed(res[idx1:idx2])
    return res


def mutate(tour: Sequence[int], rng: random.Random) -> Tour:
    n = len(tour)
    idx1 = rng.randint(0, n)
    idx2 = rng.randint(idx1, n)
    return invert_segment(tour, idx1, idx2)
