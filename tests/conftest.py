"""
AquaGuard - pytest Configuration and Fixtures

Provides shared test fixtures for:
- Building Sample objects
- A three-collector snapshot with one suppressed-variance collector,
  one impossible-speed collector and one unremarkable collector
"""

from collections import OrderedDict
from datetime import datetime, timedelta, timezone

import pytest

from aquaguard.config import CollectorProfile
from aquaguard.models import GeoLocation, Sample

BASE_TIME = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)

# Roughly central Tehran
BASE_LAT = 35.70
BASE_LNG = 51.40


def make_sample(
    sample_id,
    collector_id,
    minutes=0.0,
    lat=BASE_LAT,
    lng=BASE_LNG,
    **metrics,
):
    """Build a Sample taken `minutes` after BASE_TIME."""
    return Sample(
        id=sample_id,
        collector_id=collector_id,
        timestamp=BASE_TIME + timedelta(minutes=minutes),
        location=GeoLocation(lat=lat, lng=lng, accuracy=5.0),
        metrics=metrics,
    )


@pytest.fixture
def sample_factory():
    """Factory for Sample objects."""
    return make_sample


@pytest.fixture
def collectors():
    """Three collectors, in tie-break order."""
    return OrderedDict([
        ("steady", CollectorProfile(label="Steady", color="#10b981")),
        ("copier", CollectorProfile(label="Copier", color="#3b82f6")),
        ("speeder", CollectorProfile(label="Speeder", color="#ec4899")),
    ])


@pytest.fixture
def audit_samples():
    """
    Chlorine snapshot for ranking tests.

    - steady: 8 evenly spread readings, one hour and ~1 km apart
    - copier: 6 readings alternating 0.70 / 0.71
    - speeder: 2 readings ~50 km apart, 5 minutes apart
    """
    samples = []

    for i, value in enumerate([0.2, 0.4, 0.6, 0.8, 1.0, 1.2, 1.4, 1.6]):
        samples.append(make_sample(
            f"s{i}", "steady", minutes=60 * i, lat=BASE_LAT + 0.01 * i, chlorine=value,
        ))

    for i, value in enumerate([0.70, 0.71, 0.70, 0.71, 0.70, 0.71]):
        samples.append(make_sample(
            f"c{i}", "copier", minutes=60 * i, lng=BASE_LNG + 0.01 * i, chlorine=value,
        ))

    # 0.45 degrees of latitude ≈ 50 km
    samples.append(make_sample("v0", "speeder", minutes=0, chlorine=0.5))
    samples.append(make_sample("v1", "speeder", minutes=5, lat=BASE_LAT + 0.45, chlorine=1.0))

    return samples
