"""
Pairwise Correlation

Genuine measurements of related water-quality metrics co-vary; invented
numbers usually do not. Correlations feed the metric x metric matrix and
the per-collector profiles used for side-by-side comparison.
"""

import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from ..config import CORRELATION_PAIRS, METRIC_KEYS
from ..models import Sample

# Collectors with fewer samples get an empty profile
MIN_PROFILE_SAMPLES = 3


def _present(value: Optional[float]) -> bool:
    return value is not None and not math.isnan(value)


def pearson(x: Sequence[Optional[float]], y: Sequence[Optional[float]]) -> float:
    """
    Pearson correlation over index pairs where both values are present.

    Returns:
        Coefficient in [-1, 1]; 0.0 when fewer than 2 pairs remain or either
        series has no variance
    """
    pairs = [(float(a), float(b)) for a, b in zip(x, y) if _present(a) and _present(b)]
    n = len(pairs)
    if n < 2:
        return 0.0

    mean_x = sum(a for a, _ in pairs) / n
    mean_y = sum(b for _, b in pairs) / n

    num = 0.0
    den_x = 0.0
    den_y = 0.0
    for a, b in pairs:
        dx = a - mean_x
        dy = b - mean_y
        num += dx * dy
        den_x += dx * dx
        den_y += dy * dy

    den = math.sqrt(den_x * den_y)
    if den == 0:
        return 0.0
    return max(-1.0, min(1.0, num / den))


def correlation_matrix(
    samples: Iterable[Sample],
    metrics: Optional[List[str]] = None,
) -> pd.DataFrame:
    """Square matrix of pairwise correlations, keyed by metric on both axes."""
    samples = list(samples)
    metrics = metrics or list(METRIC_KEYS)
    columns = {m: [s.metric(m) for s in samples] for m in metrics}

    matrix = pd.DataFrame(index=metrics, columns=metrics, dtype=float)
    for m1 in metrics:
        for m2 in metrics:
            matrix.loc[m1, m2] = pearson(columns[m1], columns[m2])
    return matrix


def collector_profiles(
    samples: Iterable[Sample],
    collectors: Iterable[str],
    pairs: Optional[List[Tuple[str, str, str]]] = None,
) -> Dict[str, Dict[str, float]]:
    """
    Strength of each metric-pair correlation per collector.

    Args:
        samples: Full sample set
        collectors: Collector ids, in display order
        pairs: (axis label, metric a, metric b); defaults to CORRELATION_PAIRS

    Returns:
        {collector_id: {axis label: |r| * 100}}; empty for collectors with
        fewer than 3 samples
    """
    samples = list(samples)
    pairs = pairs or CORRELATION_PAIRS

    profiles: Dict[str, Dict[str, float]] = {}
    for collector_id in collectors:
        own = [s for s in samples if s.collector_id == collector_id]
        if len(own) < MIN_PROFILE_SAMPLES:
            profiles[collector_id] = {}
            continue
        profiles[collector_id] = {
            label: abs(pearson([s.metric(a) for s in own], [s.metric(b) for s in own])) * 100
            for label, a, b in pairs
        }
    return profiles


def profiles_frame(profiles: Mapping[str, Mapping[str, float]]) -> pd.DataFrame:
    """Collector profiles as a DataFrame (rows = axes, columns = collectors)."""
    return pd.DataFrame({c: dict(p) for c, p in profiles.items()})
