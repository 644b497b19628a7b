"""
AquaGuard: statistical forensics for field-collected water-quality samples.
"""

from .models import GeoLocation, Sample, StatResult, RankingEntry

__all__ = ["GeoLocation", "Sample", "StatResult", "RankingEntry"]
