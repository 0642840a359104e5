import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import networkx as nx
import numpy as np
import torch
import tsplib95

from .tours.base import euclidean


COORD_RANGE = 100.0

# Fixed layout used for repeatable runs; the first n points are taken.
FIXTURE_COORDS = [
    (12.0, 85.5),
    (47.25, 91.0),
    (88.0, 73.5),
    (63.5, 52.0),
    (20.75, 44.0),
    (5.5, 12.25),
    (38.0, 20.5),
    (71.0, 8.75),
    (95.5, 30.0),
    (54.0, 67.25),
    (29.5, 63.0),
    (80.25, 95.0),
    (2.0, 58.5),
    (44.5, 2.5),
    (66.0, 31.75),
    (91.25, 55.5),
]

UNIT_SQUARE = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)]

SOURCES = ("random", "fixture", "tsplib")


@dataclass(frozen=True)
class Town:
    x: float
    y: float

    def distance_to(self, other: "Town") -> float:
        return euclidean((self.x, self.y), (other.x, other.y))


class TownSet:
    """Immutable list of towns; a town is identified by its index."""

    def __init__(self, towns: Iterable[Town], name: Optional[str] = None):
        self.towns = tuple(towns)
        self.name = name
        self.coords = np.array([[t.x, t.y] for t in self.towns], dtype=np.float64).reshape(-1, 2)
        self.coords.setflags(write=False)
        self._graph: Optional[nx.Graph] = None

    @classmethod
    def from_coords(cls, coords: Iterable[Sequence[float]], name: Optional[str] = None) -> "TownSet":
        return cls((Town(float(x), float(y)) for x, y in coords), name=name)

    def __len__(self) -> int:
        return len(self.towns)

    def __getitem__(self, idx: int) -> Town:
        return self.towns[idx]

    def __iter__(self):
        return iter(self.towns)

    def distance(self, a: int, b: int) -> float:
        return self.towns[a].distance_to(self.towns[b])

    def graph(self) -> nx.Graph:
        if self._graph is None:
            graph = nx.complete_graph(len(self.towns))
            for u, v in graph.edges():
                graph[u][v]["weight"] = self.distance(u, v)
            self._graph = graph
        return self._graph

    def distance_matrix(self, device=None) -> torch.Tensor:
        diff = self.coords[:, None, :] - self.coords[None, :, :]
        mat = np.sqrt((diff ** 2).sum(axis=-1))
        return torch.as_tensor(mat, dtype=torch.float64, device=device)


def parse_town_count(line: str) -> int:
    text = line.strip()
    try:
        n = int(text)
    except ValueError:
        raise ValueError(f"Expected a positive integer town count, got {text!r}") from None
    if n < 1:
        raise ValueError(f"Town count must be positive, got {n}")
    return n


def random_towns(n: int, rng: random.Random) -> TownSet:
    # random() is half-open, so points stay inside [0, 100).
    coords = [(rng.random() * COORD_RANGE, rng.random() * COORD_RANGE) for _ in range(n)]
    return TownSet.from_coords(coords, name=f"random{n}")


def fixture_towns(n: Optional[int] = None) -> TownSet:
    if n is None:
        n = len(FIXTURE_COORDS)
    if n > len(FIXTURE_COORDS):
        raise ValueError(f"Fixture holds {len(FIXTURE_COORDS)} towns, {n} requested")
    return TownSet.from_coords(FIXTURE_COORDS[:n], name=f"fixture{n}")


def unit_square() -> TownSet:
    return TownSet.from_coords(UNIT_SQUARE, name="unit_square")


def load_tsplib_towns(path: Path, n: Optional[int] = None) -> TownSet:
    problem = tsplib95.load(path)
    coords = problem.node_coords or problem.display_data
    if not coords:
        raise ValueError(f"{path} has no node coordinates")
    points: List[Sequence[float]] = [coords[node][:2] for node in sorted(coords)]
    if n is not None:
        points = points[:n]
    return TownSet.from_coords(points, name=problem.name)


def load_towns(
    source: str,
    n: Optional[int] = None,
    rng: Optional[random.Random] = None,
    path: Optional[Path] = None,
) -> TownSet:
    if source == "random":
        if n is None:
            raise ValueError("Random towns need a town count")
        return random_towns(n, rng or random.Random())
    if source == "fixture":
        return fixture_towns(n)
    if source == "tsplib":
        if path is None:
            raise ValueError("TSPLIB source needs a file path")
        return load_tsplib_towns(Path(path), n)
    raise ValueError(f"Unknown town source {source!r}; expected one of {SOURCES}")
