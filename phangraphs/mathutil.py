"""Numeric helpers shared by the scoring modules."""

import math
import statistics

import numpy as np


def round_half_up(value, digits=0):
    """Round to ``digits`` decimals with halves going up (2.5 → 3, -2.5 → -2)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percentile(values, p):
    """Linear-interpolation percentile (numpy's default method).

    Returns 0 for an empty sequence; a single value is its own percentile.
    """
    if len(values) == 0:
        return 0.0
    return float(np.percentile(values, p))


def population_stats(values):
    """Return (mean, population std dev) of a non-empty sequence."""
    mean = statistics.fmean(values)
    return mean, statistics.pstdev(values, mu=mean)


def safe_ratio(numerator, denominator, digits=3):
    """numerator / denominator rounded, or 0 when the denominator is 0."""
    if denominator <= 0:
        return 0.0
    return round_half_up(numerator / denominator, digits)
