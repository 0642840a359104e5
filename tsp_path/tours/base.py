import math
from typing import List, Sequence, Tuple

import networkx as nx


Tour = List[int]


def tour_key(tour: Sequence[int]) -> Tuple[int, ...]:
    return tuple(tour)


def is_permutation(tour: Sequence[int], n: int) -> bool:
    return len(tour) == n and sorted(tour) == list(range(n))


def path_length(graph: nx.Graph, tour: Sequence[int]) -> float:
    # Open path: the last town does not connect back to the first.
    dist = 0.0
    for i in range(len(tour) - 1):
        a = tour[i]
        b = tour[i + 1]
        dist += graph[a][b]["weight"]
    return float(dist)


def euclidean(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2)
