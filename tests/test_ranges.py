"""Range comparators."""
import math

import pytest

from hmatch.heuristic.ranges import gaussian_range, linear_range


def test_exact_match_scores_one():
    assert linear_range(10, 10, 0, 10, 20) == 1
    assert linear_range(0, 0, 0, 10, 20) == 1


def test_linear_decreases_with_distance():
    scores = [linear_range(10, 10 + d, 0, 10, 20) for d in range(0, 11)]
    assert scores == sorted(scores, reverse=True)
    assert linear_range(10, 15, 0, 10, 20) == pytest.approx(0.5)
    assert linear_range(10, 20, 0, 10, 20) == 0


def test_linear_is_zero_beyond_upper_half_width():
    assert linear_range(10, 21, 0, 10, 20) == 0
    assert linear_range(10, 100, 0, 10, 20) == 0


def test_linear_uses_upper_half_width_on_both_sides():
    # min is ignored: below and above use max - ref alike
    assert linear_range(10, 5, 0, 10, 20) == linear_range(10, 15, 0, 10, 20)
    assert linear_range(10, 5, 9, 10, 20) == pytest.approx(0.5)


def test_linear_degenerate_half_width():
    assert linear_range(1, 2, 0, 10, 10) == 0
    assert linear_range(1, 1, 0, 10, 10) == 1


def test_gaussian_end_points():
    assert gaussian_range(5, 5, 0, 10, 20) == 1
    assert gaussian_range(0, 50, 0, 10, 20) == pytest.approx(round(math.exp(-3), 3))
    assert gaussian_range(0, 50, 0, 10, 20) == 0.05


def test_gaussian_monotone_and_bounded():
    values = [gaussian_range(10, 10 + d, 0, 10, 20) for d in range(0, 15)]
    assert values == sorted(values, reverse=True)
    assert all(0 <= v <= 1 for v in values)
