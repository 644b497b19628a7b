"""
Forensic Screens for Field-Collected Water-Quality Data.

Components (leaf-first):
1. quantiles: inverse normal CDF and Q-Q pairs
2. statistics: descriptive statistics + Jarque-Bera normality
3. digits: Benford first-digit and last-digit screens
4. correlation: pairwise Pearson, matrix and collector profiles
5. interpolation: inverse distance weighting for map overlays
6. integrity: per-collector integrity score and ranking
7. operations: daily field-work pace

Every function is a full recomputation over the samples it is given.
"""

from .quantiles import probit, qq_points, qq_points_for
from .statistics import compute_stats, z_scores, histogram
from .digits import (
    benford_distribution,
    benford_deviation,
    benford_chi_square,
    last_digit_distribution,
    digit_preference_score,
    value_frequency,
)
from .correlation import pearson, correlation_matrix, collector_profiles, profiles_frame
from .interpolation import idw, idw_grid
from .integrity import (
    IntegrityScorer,
    INTEGRITY_RULES,
    gradient_violations,
    ranking_frame,
)
from .operations import daily_field_stats, daily_field_frame

__all__ = [
    # Quantiles
    "probit",
    "qq_points",
    "qq_points_for",
    # Statistics
    "compute_stats",
    "z_scores",
    "histogram",
    # Digits
    "benford_distribution",
    "benford_deviation",
    "benford_chi_square",
    "last_digit_distribution",
    "digit_preference_score",
    "value_frequency",
    # Correlation
    "pearson",
    "correlation_matrix",
    "collector_profiles",
    "profiles_frame",
    # Interpolation
    "idw",
    "idw_grid",
    # Integrity
    "IntegrityScorer",
    "INTEGRITY_RULES",
    "gradient_violations",
    "ranking_frame",
    # Field work
    "daily_field_stats",
    "daily_field_frame",
]
