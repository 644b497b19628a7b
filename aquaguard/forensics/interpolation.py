"""
Inverse Distance Weighting (IDW) for map overlays.

Distances are planar in degrees (lat/lng treated as Cartesian), which is
adequate at city scale. Every call is independent and reads nothing but its
arguments, so raster cells can be evaluated in any order or in parallel.
"""

from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from ..config import IDW_DEFAULT_POWER, IDW_EPSILON
from ..models import Sample


def idw(
    lat: float,
    lng: float,
    samples: Iterable[Sample],
    metric: str,
    power: float = IDW_DEFAULT_POWER,
) -> Optional[float]:
    """
    Estimate a metric at (lat, lng).

    Args:
        lat, lng: Query coordinate
        samples: Known measurements
        metric: Metric key to estimate
        power: Distance exponent

    Returns:
        Weighted estimate, the value of a coincident sample, or None when no
        sample carries the metric
    """
    numerator = 0.0
    denominator = 0.0

    for sample in samples:
        value = sample.metric(metric)
        if value is None:
            continue

        d_lat = lat - sample.location.lat
        d_lng = lng - sample.location.lng
        distance_sq = d_lat * d_lat + d_lng * d_lng

        if distance_sq < IDW_EPSILON:
            return value

        weight = 1.0 / (distance_sq ** 0.5) ** power
        numerator += weight * value
        denominator += weight

    if denominator == 0:
        return None
    return numerator / denominator


def idw_grid(
    samples: Sequence[Sample],
    metric: str,
    lat_bounds: Tuple[float, float],
    lng_bounds: Tuple[float, float],
    rows: int,
    cols: int,
    power: float = IDW_DEFAULT_POWER,
) -> np.ndarray:
    """
    Evaluate IDW at the centre of each cell of a rows x cols raster.

    Row 0 is the northern edge (max latitude), column 0 the western edge.
    Cells without an estimate are NaN.
    """
    south, north = lat_bounds
    west, east = lng_bounds
    cell_h = (north - south) / rows
    cell_w = (east - west) / cols

    grid = np.full((rows, cols), np.nan)
    for i in range(rows):
        lat = north - (i + 0.5) * cell_h
        for j in range(cols):
            lng = west + (j + 0.5) * cell_w
            value = idw(lat, lng, samples, metric, power)
            if value is not None:
                grid[i, j] = value
    return grid
