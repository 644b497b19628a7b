"""
Digit Pattern Screens

Manual data entry leaves fingerprints in the digits of reported values:
1. Benford's Law - first significant digit of naturally occurring values
   is distributed logarithmically (digit 1 in ~30% of values)
2. Last digit - the second decimal of a genuine reading is close to uniform;
   humans prefer 0 and 5
3. Value frequency - how often each collector reports the same rounded value
"""

from typing import Dict, Iterable, List, Optional

import pandas as pd
from scipy import stats

from ..config import (
    BENFORD_CHI2_CRITICAL,
    BENFORD_EXPECTED,
    BENFORD_MIN_SAMPLES,
    FREQUENCY_ROUNDING,
)
from ..models import BenfordTest, DigitFrequency, Sample
from .statistics import clean_values


# =============================================================================
# Benford's Law
# =============================================================================

def first_digit(value: float) -> Optional[int]:
    """First significant digit of |value|, or None for zero."""
    text = str(abs(value)).replace("0", "").replace(".", "")
    if not text or not text[0].isdigit():
        return None
    return int(text[0])


def _first_digits(values: Iterable[Optional[float]]) -> List[int]:
    digits = []
    for v in clean_values(values):
        d = first_digit(v)
        if d is not None:
            digits.append(d)
    return digits


def benford_distribution(values: Iterable[Optional[float]]) -> List[DigitFrequency]:
    """
    First-digit frequencies compared with Benford's Law.

    Returns:
        One entry per digit 1-9 with actual and expected percentages,
        or an empty list when no value has a significant digit
    """
    digits = _first_digits(values)
    if not digits:
        return []

    counts = pd.Series(digits).value_counts()
    total = len(digits)
    return [
        DigitFrequency(
            digit=d,
            actual=float(counts.get(d, 0)) / total * 100,
            expected=BENFORD_EXPECTED[d],
        )
        for d in range(1, 10)
    ]


def benford_deviation(distribution: List[DigitFrequency]) -> float:
    """Sum of absolute differences (percentage points) from Benford's Law."""
    return sum(abs(f.actual - f.expected) for f in distribution)


def benford_chi_square(values: Iterable[Optional[float]], alpha: float = 0.05) -> BenfordTest:
    """
    Chi-square goodness of fit of first digits against Benford's Law.

    Args:
        values: Measurements; None/NaN and zeros are ignored
        alpha: Significance level (0.10, 0.05, 0.01 or 0.001)

    Returns:
        BenfordTest with test outcome
    """
    digits = _first_digits(values)
    critical = BENFORD_CHI2_CRITICAL[alpha]

    if len(digits) < BENFORD_MIN_SAMPLES:
        return BenfordTest(
            statistic=0.0,
            p_value=None,
            is_anomaly=False,
            threshold=critical,
            sample_size=len(digits),
            description=f"Insufficient data (need at least {BENFORD_MIN_SAMPLES} samples)",
        )

    observed = pd.Series(digits).value_counts(normalize=True)

    chi_sq = 0.0
    for digit in range(1, 10):
        obs = float(observed.get(digit, 0.0))
        exp = BENFORD_EXPECTED[digit] / 100
        chi_sq += ((obs - exp) ** 2) / exp

    # Scale by sample size
    chi_sq *= len(digits)

    return BenfordTest(
        statistic=float(chi_sq),
        p_value=float(stats.chi2.sf(chi_sq, df=8)),
        is_anomaly=bool(chi_sq > critical),
        threshold=critical,
        sample_size=len(digits),
        description=f"Chi-square = {chi_sq:.2f}, critical = {critical:.2f}",
    )


# =============================================================================
# Last Digit
# =============================================================================

def last_digit_distribution(values: Iterable[Optional[float]]) -> List[DigitFrequency]:
    """Frequency of the second decimal digit; uniform 10% expected."""
    digits = [int(f"{v:.2f}"[-1]) for v in clean_values(values)]
    if not digits:
        return []

    counts = pd.Series(digits).value_counts()
    total = len(digits)
    return [
        DigitFrequency(digit=d, actual=float(counts.get(d, 0)) / total * 100, expected=10.0)
        for d in range(10)
    ]


def digit_preference_score(distribution: List[DigitFrequency]) -> float:
    """
    100 for perfectly uniform last digits, falling 2 points per point of deviation.

    An empty distribution carries no evidence of uniformity and scores 0.
    """
    if not distribution:
        return 0.0
    deviation = sum(abs(f.actual - 10.0) for f in distribution)
    return max(0.0, 100 - 2 * deviation)


# =============================================================================
# Rounded Value Frequency
# =============================================================================

def round_for_frequency(value: float, metric: str) -> float:
    """Round a value to the bin used in frequency tables for this metric."""
    step = FREQUENCY_ROUNDING.get(metric)
    if step is None:
        return float(round(value))
    if step >= 1:
        return float(round(value / step) * step)
    return round(value, 1)


def value_frequency(
    samples: Iterable[Sample],
    metric: str,
    collectors: Iterable[str],
) -> pd.DataFrame:
    """
    Count how often each collector reports each rounded value.

    Returns:
        DataFrame indexed by rounded value (ascending), one column per collector
    """
    collectors = list(collectors)
    counts: Dict[str, Dict[float, int]] = {c: {} for c in collectors}

    for sample in samples:
        if sample.collector_id not in counts:
            continue
        value = sample.metric(metric)
        if value is None:
            continue
        key = round_for_frequency(value, metric)
        bins = counts[sample.collector_id]
        bins[key] = bins.get(key, 0) + 1

    table = pd.DataFrame(counts, columns=collectors).fillna(0).astype(int)
    table.index.name = "value"
    return table.sort_index()
