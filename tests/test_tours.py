"""
Tests for tour representation and the crossover / mutation operators.

Run with: python -m pytest tests/test_tours.py -v
"""

import math
import random

import pytest

from tsp_path.data import unit_square
from tsp_path.tours import (
    cut_points,
    invert_segment,
    is_permutation,
    mutate,
    ordered_crossover,
    pairwise_crossover,
    path_length,
    tour_key,
)


class TestTourBasics:
    """Tests for permutation checks, keys and open-path length."""

    def test_is_permutation(self):
        assert is_permutation([2, 0, 1], 3)
        assert not is_permutation([0, 0, 1], 3)
        assert not is_permutation([0, 1], 3)
        assert is_permutation([], 0)

    def test_tour_key_is_hashable_and_structural(self):
        assert tour_key([1, 2, 3]) == tour_key((1, 2, 3))
        assert len({tour_key([0, 1]), tour_key([0, 1]), tour_key([1, 0])}) == 2

    def test_path_length_has_no_return_edge(self):
        graph = unit_square().graph()
        assert path_length(graph, [0, 1, 2, 3]) == pytest.approx(3.0)
        assert path_length(graph, [0, 2, 1, 3]) == pytest.approx(1 + 2 * math.sqrt(2))

    def test_path_length_degenerate(self):
        graph = unit_square().graph()
        assert path_length(graph, [2]) == 0.0
        assert path_length(graph, []) == 0.0


class TestCutPoints:
    """Tests for the two cut-point policies."""

    @pytest.mark.parametrize("policy", ["uniform", "thirds"])
    @pytest.mark.parametrize("length", [0, 1, 2, 5, 30])
    def test_cut_points_in_range(self, policy, length):
        rng = random.Random(1)
        for _ in range(200):
            idx1, idx2 = cut_points(length, rng, policy)
            assert 0 <= idx1 <= idx2 <= length

    def test_thirds_segment_is_short(self):
        rng = random.Random(2)
        for _ in range(200):
            idx1, idx2 = cut_points(30, rng, "thirds")
            assert idx1 <= 10
            assert idx2 - idx1 <= 10

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            cut_points(10, random.Random(0), "halves")


class TestCrossover:
    """Tests for order-preserving crossover."""

    def test_copies_segment_then_walks_parent2(self):
        p1 = [0, 1, 2, 3, 4, 5]
        p2 = [5, 3, 1, 0, 4, 2]
        child = ordered_crossover(p1, p2, 1, 3)
        # segment [1, 2], then p2 from index 3: 0, 4, (2), 5, 3, (1)
        assert child == [1, 2, 0, 4, 5, 3]

    def test_empty_segment_rotates_parent2(self):
        p1 = [0, 1, 2, 3, 4]
        p2 = [3, 0, 4, 2, 1]
        for idx in range(len(p1) + 1):
            child = ordered_crossover(p1, p2, idx, idx)
            assert child == p2[idx:] + p2[:idx]

    def test_full_segment_copies_parent1(self):
        p1 = [4, 2, 0, 3, 1]
        p2 = [0, 1, 2, 3, 4]
        assert ordered_crossover(p1, p2, 0, 5) == p1

    @pytest.mark.parametrize("policy", ["uniform", "thirds"])
    def test_crossover_closure(self, policy):
        rng = random.Random(3)
        for n in [1, 2, 3, 7, 20]:
            for _ in range(50):
                p1 = list(range(n))
                p2 = list(range(n))
                rng.shuffle(p1)
                rng.shuffle(p2)
                child = pairwise_crossover(p1, p2, rng, policy)
                assert is_permutation(child, n)

    def test_parents_are_not_modified(self):
        p1 = [0, 1, 2, 3]
        p2 = [3, 2, 1, 0]
        pairwise_crossover(p1, p2, random.Random(4))
        assert p1 == [0, 1, 2, 3]
        assert p2 == [3, 2, 1, 0]

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            pairwise_crossover([0, 1], [0, 1, 2], random.Random(0))


class TestMutation:
    """Tests for segment inversion."""

    def test_invert_segment(self):
        assert invert_segment([0, 1, 2, 3, 4], 1, 4) == [0, 3, 2, 1, 4]
        assert invert_segment([0, 1, 2], 1, 1) == [0, 1, 2]

    def test_mutation_closure(self):
        rng = random.Random(5)
        for n in [0, 1, 2, 6, 25]:
            tour = list(range(n))
            rng.shuffle(tour)
            for _ in range(50):
                mutated = mutate(tour, rng)
                assert is_permutation(mutated, n)

    def test_mutation_does_not_touch_input(self):
        tour = [0, 1, 2, 3, 4, 5]
        rng = random.Random(6)
        for _ in range(20):
            mutate(tour, rng)
        assert tour == [0, 1, 2, 3, 4, 5]
