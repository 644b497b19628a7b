"""
Configuration and constants for water-quality forensics.
"""

import logging
import os
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"

SAMPLES_FILE = DATA_DIR / "water_samples.csv"

# === Logging ===
LOG_LEVEL = os.environ.get("AQUAGUARD_LOG_LEVEL", "INFO")


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Attach a console handler to the package logger (call from scripts, not on import)."""
    logger = logging.getLogger("aquaguard")
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))


# === Metrics ===
class Metric:
    CHLORINE = "chlorine"      # mg/L
    EC = "ec"                  # µS/cm
    PH = "ph"                  # 0-14
    TURBIDITY = "turbidity"    # NTU


METRIC_KEYS = [Metric.CHLORINE, Metric.EC, Metric.PH, Metric.TURBIDITY]

METRIC_LABELS = {
    Metric.CHLORINE: "Free chlorine (mg/L)",
    Metric.EC: "Electrical conductivity (µS/cm)",
    Metric.PH: "pH",
    Metric.TURBIDITY: "Turbidity (NTU)",
}

# High-precision manual entries, checked against Benford's Law
BENFORD_METRICS = [Metric.EC, Metric.TURBIDITY]

# Metric pairs for per-collector correlation profiles
CORRELATION_PAIRS = [
    ("Cl-pH", Metric.CHLORINE, Metric.PH),
    ("Cl-EC", Metric.CHLORINE, Metric.EC),
    ("pH-EC", Metric.PH, Metric.EC),
    ("EC-Turb", Metric.EC, Metric.TURBIDITY),
    ("pH-Turb", Metric.PH, Metric.TURBIDITY),
    ("Cl-Turb", Metric.CHLORINE, Metric.TURBIDITY),
]

# Rounding steps for per-collector value frequency tables (None = integer)
FREQUENCY_ROUNDING = {
    Metric.EC: 50,
    Metric.PH: 0.1,
    Metric.CHLORINE: 0.1,
}


# === Collectors ===
@dataclass(frozen=True)
class CollectorProfile:
    """Display attributes of a field collector."""
    label: str
    color: str


DEFAULT_COLLECTORS = OrderedDict([
    ("mohammadreza_ebtekari", CollectorProfile(label="Mohammadreza Ebtekari", color="#3b82f6")),
    ("abolfazl_sharghi", CollectorProfile(label="Abolfazl Sharghi", color="#8b5cf6")),
    ("saeed_moharrari", CollectorProfile(label="Saeed Moharrari", color="#ec4899")),
])


# === Statistical constants ===
Z_CRITICAL_95 = 1.96          # normal approximation, used for every n
JB_CRITICAL_95 = 5.99         # chi-square, 2 d.o.f., alpha = 0.05

# Benford's Law expected first-digit percentages
BENFORD_EXPECTED = {
    1: 30.1, 2: 17.6, 3: 12.5, 4: 9.7,
    5: 7.9, 6: 6.7, 7: 5.8, 8: 5.1, 9: 4.6,
}

# Chi-square critical values (df=8)
BENFORD_CHI2_CRITICAL = {
    0.10: 13.36,
    0.05: 15.51,
    0.01: 20.09,
    0.001: 26.12,
}
BENFORD_MIN_SAMPLES = 30

# Coincident points in IDW (squared degrees)
IDW_EPSILON = 1e-10
IDW_DEFAULT_POWER = 2

# Daily field statistics: intervals longer than this are breaks, not field work
FIELD_INTERVAL_MAX_MINUTES = 20.0
FIELD_INTERVAL_MAX_METERS = 1000.0

EARTH_RADIUS_M = 6_371_000.0


# === Integrity thresholds ===
@dataclass(frozen=True)
class IntegrityThresholds:
    """Every constant used by the integrity scorer."""
    # Variance suppression
    variance_ratio: float = 0.25
    variance_min_samples: int = 4          # strictly more than
    variance_penalty: float = 20.0

    # Mean deviation
    mean_deviation_ratio: float = 0.4
    mean_deviation_min_samples: int = 5    # strictly more than
    mean_deviation_penalty: float = 15.0

    # Normality mismatch
    normality_penalty: float = 10.0

    # Benford
    benford_deviation: float = 50.0
    benford_min_samples: int = 8           # strictly more than
    benford_penalty: float = 15.0

    # Travel speed
    max_speed_kmh: float = 130.0
    speed_penalty: float = 20.0

    # Short-range gradients
    gradient_max_distance_m: float = 300.0
    gradient_min_distance_m: float = 1.0
    chlorine_jump: float = 0.8
    ph_jump: float = 1.2
    gradient_penalty: float = 12.0
