"""
Data loading utilities for water-sample snapshots.

Rows come from the persistence layer (one row per sample, metrics as flat
columns). Polars handles CSV scanning; the forensic screens work on
immutable Sample objects.
"""

import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

import pandas as pd
import polars as pl

from .config import METRIC_KEYS, SAMPLES_FILE
from .models import GeoLocation, Sample

logger = logging.getLogger(__name__)


# === Schema definitions for Polars ===
SAMPLE_SCHEMA = {
    "id": pl.Utf8,
    "sampler_id": pl.Utf8,
    "timestamp": pl.Utf8,  # Will parse separately
    "lat": pl.Float64,
    "lng": pl.Float64,
    "accuracy": pl.Float64,
    "address": pl.Utf8,
    "chlorine": pl.Float64,
    "ec": pl.Float64,
    "ph": pl.Float64,
    "turbidity": pl.Float64,
    "notes": pl.Utf8,
}

REQUIRED_COLUMNS = ["id", "sampler_id", "timestamp", "lat", "lng"]


def _missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def parse_timestamp(value: Union[str, int, float, datetime]) -> datetime:
    """Parse an ISO string, epoch milliseconds (number or digit string) or datetime into an aware datetime."""
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())

    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, (int, float)):
        ts = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    else:
        ts = datetime.fromisoformat(str(value).replace("Z", "+00:00"))

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def sample_from_record(record: Mapping[str, Any]) -> Sample:
    """
    Build a Sample from a persisted row.

    Accepts either ``sampler_id`` or ``collector_id`` for the collector.
    Missing metric columns and empty cells become absent metrics.

    Raises:
        ValueError: if a required field is missing
    """
    row = dict(record)
    if _missing(row.get("sampler_id")) and not _missing(row.get("collector_id")):
        row["sampler_id"] = row["collector_id"]

    missing = [c for c in REQUIRED_COLUMNS if _missing(row.get(c))]
    if missing:
        raise ValueError(f"Sample row {row.get('id')!r} is missing required fields: {missing}")

    metrics = {}
    for key in METRIC_KEYS:
        value = row.get(key)
        metrics[key] = None if _missing(value) else float(value)

    accuracy = row.get("accuracy")
    address = row.get("address")
    notes = row.get("notes")

    return Sample(
        id=str(row["id"]),
        collector_id=str(row["sampler_id"]),
        timestamp=parse_timestamp(row["timestamp"]),
        location=GeoLocation(
            lat=float(row["lat"]),
            lng=float(row["lng"]),
            accuracy=0.0 if _missing(accuracy) else float(accuracy),
            address=None if _missing(address) else str(address),
        ),
        metrics=metrics,
        notes=None if _missing(notes) else str(notes),
    )


def samples_from_records(records: Iterable[Mapping[str, Any]]) -> List[Sample]:
    """Build Samples from persisted rows."""
    return [sample_from_record(r) for r in records]


def load_samples(
    path: Optional[Path] = None,
    collectors: Optional[List[str]] = None,
    return_polars: bool = False,
) -> Union[List[Sample], pl.DataFrame]:
    """
    Load a sample snapshot from CSV using Polars.

    Args:
        path: CSV file. None = SAMPLES_FILE.
        collectors: Keep only these collector ids. None = all.
        return_polars: If True, return the Polars DataFrame instead of Samples.

    Returns:
        List of Samples (or Polars DataFrame).

    Examples:
        >>> samples = load_samples()
        >>> df = load_samples(collectors=["saeed_moharrari"], return_polars=True)
    """
    path = Path(path) if path is not None else SAMPLES_FILE
    if not path.exists():
        raise ValueError(f"No data found at {path}")

    lf = pl.scan_csv(
        path,
        schema_overrides={k: v for k, v in SAMPLE_SCHEMA.items()},
        ignore_errors=True,
    )

    if collectors:
        lf = lf.filter(pl.col("sampler_id").is_in(collectors))

    df = lf.collect()
    logger.info("Loaded %d sample rows from %s", len(df), path)

    if return_polars:
        return df.with_columns(
            pl.col("timestamp").str.to_datetime(strict=False, time_zone="UTC").alias("timestamp")
        )
    return samples_from_records(df.to_dicts())


def samples_to_frame(samples: Iterable[Sample]) -> pd.DataFrame:
    """Flatten Samples into a Pandas DataFrame (one column per metric)."""
    rows = []
    for s in samples:
        row = {
            "id": s.id,
            "collector_id": s.collector_id,
            "timestamp": s.timestamp,
            "lat": s.location.lat,
            "lng": s.location.lng,
            "accuracy": s.location.accuracy,
            "address": s.location.address,
        }
        for key in METRIC_KEYS:
            row[key] = s.metric(key)
        row["notes"] = s.notes
        rows.append(row)

    columns = ["id", "collector_id", "timestamp", "lat", "lng", "accuracy", "address", *METRIC_KEYS, "notes"]
    return pd.DataFrame(rows, columns=columns)
