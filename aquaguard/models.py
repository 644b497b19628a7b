"""
Data classes for samples and derived forensic results.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, List, Mapping, Optional, Tuple


# =============================================================================
# Input
# =============================================================================

@dataclass(frozen=True)
class GeoLocation:
    """Where a sample was taken."""
    lat: float
    lng: float
    accuracy: float  # meters
    address: Optional[str] = None


@dataclass(frozen=True)
class Sample:
    """A single field measurement, read-only once created."""
    id: str
    collector_id: str
    timestamp: datetime
    location: GeoLocation
    metrics: Mapping[str, Optional[float]] = field(default_factory=dict)
    notes: Optional[str] = None

    def __post_init__(self):
        # Naive timestamps are taken as UTC
        if self.timestamp.tzinfo is None:
            object.__setattr__(self, "timestamp", self.timestamp.replace(tzinfo=timezone.utc))

    def metric(self, key: str) -> Optional[float]:
        """Value of a metric, or None when it was not recorded."""
        value = self.metrics.get(key)
        if value is None:
            return None
        value = float(value)
        if math.isnan(value):
            return None
        return value


# =============================================================================
# Derived
# =============================================================================

@dataclass(frozen=True)
class StatResult:
    """Descriptive statistics and Jarque-Bera verdict for one metric."""
    n: int
    mean: float
    median: float
    std_dev: float
    min: float
    max: float
    confidence_interval: Tuple[float, float]
    skewness: float
    kurtosis: float
    jarque_bera: float
    jarque_bera_pvalue: float
    is_normal: bool


@dataclass(frozen=True)
class DigitFrequency:
    """Observed vs expected share (%) of one digit."""
    digit: int
    actual: float
    expected: float


@dataclass(frozen=True)
class BenfordTest:
    """Chi-square goodness of fit against Benford's Law."""
    statistic: float
    p_value: Optional[float]
    is_anomaly: bool
    threshold: float
    sample_size: int
    description: str


@dataclass(frozen=True)
class QQPoint:
    theoretical: float
    value: float
    index: int


@dataclass(frozen=True)
class HistogramBin:
    start: float
    end: float
    count: int


@dataclass(frozen=True)
class GradientViolation:
    """Implausible change between two nearby consecutive samples."""
    collector_id: str
    metric: str
    previous_value: float
    value: float
    distance_m: float
    sample_id: str


@dataclass(frozen=True)
class DailyFieldStats:
    collector_id: str
    day: date
    avg_interval_minutes: float
    avg_interval_meters: float
    sample_count: int


@dataclass
class RankingEntry:
    """Trust ranking of one collector."""
    collector_id: str
    total_samples: int
    score: float
    flags: List[str] = field(default_factory=list)
    metric_scores: Dict[str, float] = field(default_factory=dict)
    label: Optional[str] = None
