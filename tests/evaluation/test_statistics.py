"""Tests for simulation statistics."""

import pytest

from src.evaluation.statistics import (
    compute_confidence_interval,
    compute_percentiles,
    compute_rate_confidence_interval,
    score_histogram,
)


class TestConfidenceInterval:
    def test_empty(self):
        assert compute_confidence_interval([]) == (0.0, 0.0, 0.0)

    def test_single_value(self):
        assert compute_confidence_interval([17]) == (17.0, 17.0, 17.0)

    def test_constant_sample(self):
        assert compute_confidence_interval([20, 20, 20]) == (20.0, 20.0, 20.0)

    def test_interval_contains_mean(self):
        mean, lower, upper = compute_confidence_interval([18, 20, 22, 24, 21])

        assert mean == pytest.approx(21.0)
        assert lower < mean < upper

    def test_wider_at_higher_confidence(self):
        values = [15, 19, 22, 25, 18, 20]
        _, lower90, upper90 = compute_confidence_interval(values, 0.90)
        _, lower99, upper99 = compute_confidence_interval(values, 0.99)

        assert upper99 - lower99 > upper90 - lower90


class TestRateInterval:
    def test_no_trials(self):
        assert compute_rate_confidence_interval(0, 0) == (0.0, 0.0, 0.0)

    def test_bounds(self):
        rate, lower, upper = compute_rate_confidence_interval(3, 10)

        assert rate == pytest.approx(0.3)
        assert 0.0 <= lower < rate < upper <= 1.0

    def test_no_successes(self):
        rate, lower, upper = compute_rate_confidence_interval(0, 50)

        assert rate == 0.0
        assert lower == pytest.approx(0.0, abs=1e-12)
        assert upper > 0.0


class TestHistogram:
    def test_counts_every_score(self):
        histogram = score_histogram([25, 24, 24, 0], 25)

        assert len(histogram) == 26
        assert histogram[24] == 2
        assert histogram[25] == 1
        assert histogram[0] == 1
        assert sum(histogram) == 4

    def test_percentiles(self):
        assert compute_percentiles([1, 2, 3, 4, 5], (50,)) == [3.0]
        assert compute_percentiles([], (25, 75)) == [0.0, 0.0]
