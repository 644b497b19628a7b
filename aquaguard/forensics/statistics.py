"""
Descriptive Statistics for Field Measurements

Per-metric summary used by the integrity scorer and the analytics views:
1. Location - mean, median, 95% confidence interval of the mean
2. Spread - sample standard deviation (n-1), min, max
3. Shape - skewness, excess kurtosis
4. Normality - Jarque-Bera statistic

Conventions:
- CI always uses z = 1.96, whatever n is
- Skewness/kurtosis use population (divide-by-n) moments, while the reported
  standard deviation and CI use the sample (n-1) variance
"""

import math
from typing import Iterable, List, Optional

import numpy as np
from scipy import stats

from ..config import JB_CRITICAL_95, Z_CRITICAL_95
from ..models import HistogramBin, StatResult


def clean_values(values: Iterable[Optional[float]]) -> List[float]:
    """Drop absent (None / NaN) and infinite entries."""
    cleaned = []
    for v in values:
        if v is None:
            continue
        v = float(v)
        if not math.isfinite(v):
            continue
        cleaned.append(v)
    return cleaned


def compute_stats(values: Iterable[Optional[float]]) -> Optional[StatResult]:
    """
    Compute descriptive statistics and the Jarque-Bera normality verdict.

    Args:
        values: Measurements of one metric; None/NaN entries are ignored

    Returns:
        StatResult, or None when fewer than 2 values remain (not computable)
    """
    data = np.asarray(clean_values(values), dtype=float)
    n = len(data)
    if n < 2:
        return None

    ordered = np.sort(data)
    mean = float(np.sum(data) / n)

    mid = n // 2
    if n % 2:
        median = float(ordered[mid])
    else:
        median = float((ordered[mid - 1] + ordered[mid]) / 2)

    deviations = data - mean
    variance = float(np.sum(deviations ** 2) / (n - 1))
    std_dev = math.sqrt(variance)
    margin = Z_CRITICAL_95 * (std_dev / math.sqrt(n))

    m3 = float(np.sum(deviations ** 3) / n)
    m4 = float(np.sum(deviations ** 4) / n)
    pop_var = variance * (n - 1) / n

    if pop_var > 0:
        skewness = m3 / pop_var ** 1.5
        kurtosis = m4 / pop_var ** 2 - 3
        jb = (n / 6) * (skewness ** 2 + kurtosis ** 2 / 4)
        is_normal = jb < JB_CRITICAL_95
    else:
        # Constant series: shape undefined, never reported as normal
        skewness = 0.0
        kurtosis = 0.0
        jb = math.inf
        is_normal = False

    return StatResult(
        n=n,
        mean=mean,
        median=median,
        std_dev=std_dev,
        min=float(ordered[0]),
        max=float(ordered[-1]),
        confidence_interval=(mean - margin, mean + margin),
        skewness=skewness,
        kurtosis=kurtosis,
        jarque_bera=jb,
        jarque_bera_pvalue=float(stats.chi2.sf(jb, df=2)),
        is_normal=bool(is_normal),
    )


def z_scores(values: Iterable[Optional[float]]) -> List[float]:
    """Standard scores of the present values (std 0 treated as 1)."""
    data = clean_values(values)
    result = compute_stats(data)
    if result is None:
        return []
    std = result.std_dev or 1.0
    return [(v - result.mean) / std for v in data]


def histogram(values: Iterable[Optional[float]]) -> List[HistogramBin]:
    """Equal-width histogram with ceil(sqrt(n)) bins between min and max."""
    data = clean_values(values)
    result = compute_stats(data)
    if result is None:
        return []

    bin_count = math.ceil(math.sqrt(len(data))) or 5
    bin_size = (result.max - result.min) / bin_count or 1.0

    counts = [0] * bin_count
    for v in data:
        index = min(math.floor((v - result.min) / bin_size), bin_count - 1)
        counts[index] += 1

    return [
        HistogramBin(
            start=result.min + i * bin_size,
            end=result.min + (i + 1) * bin_size,
            count=count,
        )
        for i, count in enumerate(counts)
    ]
