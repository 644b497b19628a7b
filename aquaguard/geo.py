"""
Geodesic helpers.
"""

import numpy as np

from .config import EARTH_RADIUS_M
from .models import Sample


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters."""
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    d_phi = np.radians(lat2 - lat1)
    d_lambda = np.radians(lng2 - lng1)

    a = (
        np.sin(d_phi / 2) ** 2
        + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    )
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(EARTH_RADIUS_M * c)


def sample_distance(a: Sample, b: Sample) -> float:
    """Distance in meters between the locations of two samples."""
    return haversine_distance(a.location.lat, a.location.lng, b.location.lat, b.location.lng)


def elapsed_minutes(a: Sample, b: Sample) -> float:
    """Minutes from sample a to sample b."""
    return (b.timestamp - a.timestamp).total_seconds() / 60.0
