from typing import List, Optional, Sequence, Tuple

import numpy as np
import torch

from .data import TownSet
from .tours.base import Tour, path_length


BACKENDS = ("torch", "graph")


class FitnessError(ValueError):
    """Raised when a tour scores NaN or infinity."""


def fitness(towns: TownSet, tour: Sequence[int]) -> float:
    return path_length(towns.graph(), tour)


def _path_lengths_torch(dist: torch.Tensor, tours: Sequence[Sequence[int]]) -> np.ndarray:
    idx = torch.tensor([list(t) for t in tours], device=dist.device, dtype=torch.long)
    idx = idx.reshape(len(tours), -1)
    a = idx[:, :-1]
    b = idx[:, 1:]
    return dist[a, b].sum(dim=1).cpu().numpy()


def evaluate_population(
    towns: TownSet,
    tours: Sequence[Sequence[int]],
    backend: str = "torch",
    dist_mat: Optional[torch.Tensor] = None,
) -> np.ndarray:
    if not tours:
        return np.zeros(0, dtype=np.float64)
    if backend == "torch":
        if dist_mat is None:
            dist_mat = towns.distance_matrix()
        scores = _path_lengths_torch(dist_mat, tours)
    elif backend == "graph":
        graph = towns.graph()
        scores = np.array([path_length(graph, t) for t in tours], dtype=np.float64)
    else:
        raise ValueError(f"Unknown backend {backend!r}; expected one of {BACKENDS}")
    if not np.isfinite(scores).all():
        bad = [i for i, s in enumerate(scores) if not np.isfinite(s)]
        raise FitnessError(f"Non-finite fitness for population members {bad}")
    return scores


def rank(scores: Sequence[float]) -> List[Tuple[int, float]]:
    # sorted() is stable, so equal scores keep population order.
    return sorted(((i, float(s)) for i, s in enumerate(scores)), key=lambda x: x[1])


def select_survivors(
    population: Sequence[Tour], scores: Sequence[float], keep: int
) -> Tuple[List[Tour], List[Tuple[int, float]]]:
    ranked = rank(scores)[: max(1, keep)]
    survivors = [list(population[i]) for i, _ in ranked]
    return survivors, ranked
