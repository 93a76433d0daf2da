"""
Population statistics over a window of values.

The standard deviation divides by N (not N-1): the window is treated as the
whole population, which is what the dashboard thresholds were tuned against.
"""

from collections.abc import Sequence

import numpy as np


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty window"""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def stddev(values: Sequence[float]) -> float:
    """Population standard deviation, 0.0 for windows of fewer than two points"""
    if len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, dtype=np.float64), ddof=0))
