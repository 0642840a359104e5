from .base import Tour, euclidean, is_permutation, path_length, tour_key
from .operators import (
    CUT_POLICIES,
    cut_points,
    invert_segment,
    mutate,
    ordered_crossover,
    pairwise_crossover,
)

__all__ = [
    "Tour",
    "euclidean",
    "is_permutation",
    "path_length",
    "tour_key",
    "CUT_POLICIES",
    "cut_points",
    "invert_segment",
    "mutate",
    "ordered_crossover",
    "pairwise_crossover",
]
