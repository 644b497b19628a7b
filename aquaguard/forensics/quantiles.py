"""
Normal quantiles for Q-Q diagnostics.

The inverse standard-normal CDF uses a two-regime rational approximation
(Acklam): a central region in q² (|q| <= 0.42, q = p - 0.5) and a tail
region in r = sqrt(-2 ln(min(p, 1 - p))).
"""

import math
from typing import Iterable, List, Optional, Sequence

from ..models import QQPoint, Sample
from .statistics import clean_values

# Central region, numerator
A = (
    -39.6968302866538,
    220.946098424520,
    -275.928510446969,
    138.357751867269,
    -30.6647980661472,
    2.50662827745924,
)

# Central region, denominator
B = (
    -54.4760987982241,
    161.585036825289,
    -155.698979859887,
    66.8013118877197,
    -13.2806815528857,
    1.0,
)

# Tail region, numerator
C = (
    -0.00778489400243029,
    -0.322396458041137,
    -2.40075827716184,
    -2.54973253934373,
    4.37466414146497,
    2.93816398269878,
)

# Tail region, denominator
D = (
    0.00778469570904146,
    0.32246712907004,
    2.44513413714300,
    3.75440866190742,
    1.0,
)

CENTRAL_LIMIT = 0.42


def _horner(coeffs: Sequence[float], x: float) -> float:
    result = 0.0
    for c in coeffs:
        result = result * x + c
    return result


def probit(p: float) -> float:
    """
    Approximate inverse of the standard normal CDF.

    Args:
        p: Probability in (0, 1)

    Returns:
        z such that Phi(z) ≈ p
    """
    q = p - 0.5

    if abs(q) <= CENTRAL_LIMIT:
        r = q * q
        return q * _horner(A, r) / _horner(B, r)

    # Lower-tail value; the upper tail is its mirror image
    r = 1 - p if q > 0 else p
    r = math.sqrt(-2 * math.log(r))
    x = _horner(C, r) / _horner(D, r)
    return -x if q > 0 else x


def qq_points(values: Iterable[Optional[float]]) -> List[QQPoint]:
    """Pair each sorted value with its theoretical normal quantile."""
    ordered = sorted(clean_values(values))
    n = len(ordered)
    return [
        QQPoint(theoretical=probit((i + 0.5) / n), value=value, index=i)
        for i, value in enumerate(ordered)
    ]


def qq_points_for(samples: Iterable[Sample], metric: str) -> List[QQPoint]:
    """Q-Q pairs for one metric across a sample set."""
    return qq_points(s.metric(metric) for s in samples)
