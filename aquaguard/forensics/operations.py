"""
Daily field-work statistics per collector.

Consecutive samples on the same day give the pace of field work. Intervals
longer than 20 minutes or 1 km are breaks or trips between sites and are
left out of the averages.
"""

from collections import OrderedDict
from datetime import timezone
from typing import Dict, Iterable, List, Optional

import pandas as pd

from ..config import DEFAULT_COLLECTORS, FIELD_INTERVAL_MAX_METERS, FIELD_INTERVAL_MAX_MINUTES
from ..geo import elapsed_minutes, sample_distance
from ..models import DailyFieldStats, Sample


def _day(sample: Sample):
    ts = sample.timestamp
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.date()


def daily_field_stats(
    samples: Iterable[Sample],
    collectors: Optional[Iterable[str]] = None,
) -> Dict[str, List[DailyFieldStats]]:
    """
    Average interval time and distance per collector per day.

    Returns:
        {collector_id: [DailyFieldStats, ...]} with days in chronological order
    """
    samples = list(samples)
    collectors = list(collectors) if collectors is not None else list(DEFAULT_COLLECTORS)

    result: Dict[str, List[DailyFieldStats]] = {}
    for collector_id in collectors:
        days: Dict = OrderedDict()
        for s in sorted((s for s in samples if s.collector_id == collector_id), key=lambda s: s.timestamp):
            days.setdefault(_day(s), []).append(s)

        stats = []
        for day, day_samples in days.items():
            time_sum = 0.0
            dist_sum = 0.0
            count = 0
            for prev, curr in zip(day_samples, day_samples[1:]):
                minutes = elapsed_minutes(prev, curr)
                meters = sample_distance(prev, curr)
                if minutes <= FIELD_INTERVAL_MAX_MINUTES and meters <= FIELD_INTERVAL_MAX_METERS:
                    time_sum += minutes
                    dist_sum += meters
                    count += 1

            stats.append(DailyFieldStats(
                collector_id=collector_id,
                day=day,
                avg_interval_minutes=time_sum / count if count else 0.0,
                avg_interval_meters=dist_sum / count if count else 0.0,
                sample_count=len(day_samples),
            ))
        result[collector_id] = stats
    return result


def daily_field_frame(stats: Dict[str, List[DailyFieldStats]]) -> pd.DataFrame:
    """Flatten daily statistics into one DataFrame."""
    return pd.DataFrame([
        {
            "collector_id": s.collector_id,
            "day": s.day,
            "avg_interval_minutes": s.avg_interval_minutes,
            "avg_interval_meters": s.avg_interval_meters,
            "sample_count": s.sample_count,
        }
        for rows in stats.values()
        for s in rows
    ])
