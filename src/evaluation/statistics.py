"""
Statistical analysis for self-play results.

Provides confidence intervals for the mean score and for the rate of perfect
games, plus a score histogram.
"""

from typing import Sequence

import numpy as np
from scipy import stats


def compute_confidence_interval(
    values: Sequence[float],
    confidence_level: float = 0.95,
) -> tuple[float, float, float]:
    """
    Compute confidence interval for sample mean.

    Args:
        values: Sample values
        confidence_level: Confidence level (default: 0.95 for 95% CI)

    Returns:
        Tuple of (mean, lower_bound, upper_bound)
    """
    if len(values) == 0:
        return 0.0, 0.0, 0.0

    n = len(values)
    mean = float(np.mean(values))
    if n < 2:
        return mean, mean, mean

    std_err = stats.sem(values)
    if std_err == 0:
        return mean, mean, mean

    # t-distribution for small samples
    t_value = stats.t.ppf((1 + confidence_level) / 2, n - 1)
    margin_of_error = t_value * std_err

    return mean, float(mean - margin_of_error), float(mean + margin_of_error)


def compute_rate_confidence_interval(
    hits: int,
    total: int,
    confidence_level: float = 0.95,
) -> tuple[float, float, float]:
    """
    Compute confidence interval for a success rate using the Wilson score interval.

    Args:
        hits: Number of successes
        total: Number of trials
        confidence_level: Confidence level

    Returns:
        Tuple of (rate, lower_bound, upper_bound)
    """
    if total == 0:
        return 0.0, 0.0, 0.0

    p = hits / total
    z = stats.norm.ppf((1 + confidence_level) / 2)

    denominator = 1 + z**2 / total
    center = (p + z**2 / (2 * total)) / denominator
    margin = z * np.sqrt((p * (1 - p) / total + z**2 / (4 * total**2))) / denominator

    lower = max(0.0, float(center - margin))
    upper = min(1.0, float(center + margin))

    return p, lower, upper


def score_histogram(scores: Sequence[int], max_score: int) -> list[int]:
    """Number of games ending at each score from 0 to ``max_score``."""
    counts = np.bincount(np.asarray(scores, dtype=np.int64), minlength=max_score + 1)
    return [int(c) for c in counts[: max_score + 1]]


def compute_percentiles(
    values: Sequence[float],
    percentiles: Sequence[int] = (25, 50, 75),
) -> list[float]:
    if len(values) == 0:
        return [0.0] * len(percentiles)
    return [float(np.percentile(values, p)) for p in percentiles]
