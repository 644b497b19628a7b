"""
AquaGuard - Data Loader Unit Tests

Tests conversion of persisted rows into Sample snapshots:
- Field mapping and absent metrics
- Timestamp formats
- CSV loading through Polars
"""

from datetime import datetime, timezone

import pytest

from aquaguard.data_loader import (
    load_samples,
    parse_timestamp,
    sample_from_record,
    samples_from_records,
    samples_to_frame,
)


@pytest.fixture
def sample_row():
    """Sample row as stored by the persistence layer."""
    return {
        "id": "abc-1",
        "sampler_id": "saeed_moharrari",
        "timestamp": "2025-03-01T08:30:00.000Z",
        "lat": 35.7,
        "lng": 51.4,
        "accuracy": 12.0,
        "address": "Valiasr St.",
        "chlorine": 0.45,
        "ec": 640.0,
        "ph": 7.3,
        "turbidity": None,
        "notes": "tap near school",
    }


class TestSampleFromRecord:
    """Row -> Sample mapping."""

    def test_maps_fields(self, sample_row):
        """All columns land on the Sample."""
        sample = sample_from_record(sample_row)
        assert sample.id == "abc-1"
        assert sample.collector_id == "saeed_moharrari"
        assert sample.timestamp == datetime(2025, 3, 1, 8, 30, tzinfo=timezone.utc)
        assert sample.location.accuracy == 12.0
        assert sample.location.address == "Valiasr St."
        assert sample.metric("chlorine") == 0.45
        assert sample.notes == "tap near school"

    def test_absent_metric(self, sample_row):
        """Empty metric cells are absent, not zero."""
        sample = sample_from_record(sample_row)
        assert sample.metric("turbidity") is None

    def test_nan_metric_is_absent(self, sample_row):
        """NaN cells are absent."""
        sample_row["ph"] = float("nan")
        assert sample_from_record(sample_row).metric("ph") is None

    def test_collector_id_alias(self, sample_row):
        """collector_id is accepted in place of sampler_id."""
        del sample_row["sampler_id"]
        sample_row["collector_id"] = "abolfazl_sharghi"
        assert sample_from_record(sample_row).collector_id == "abolfazl_sharghi"

    def test_missing_required_field(self, sample_row):
        """A row without coordinates is rejected."""
        del sample_row["lat"]
        with pytest.raises(ValueError, match="lat"):
            sample_from_record(sample_row)

    def test_many(self, sample_row):
        """samples_from_records maps every row."""
        assert len(samples_from_records([sample_row, dict(sample_row, id="abc-2")])) == 2


class TestParseTimestamp:
    """Timestamp formats."""

    def test_epoch_millis(self):
        """Integers are epoch milliseconds."""
        assert parse_timestamp(1_700_000_000_000) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_epoch_millis_string(self):
        """Digit-only strings are epoch milliseconds."""
        assert parse_timestamp("1709280000000") == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)

    def test_naive_datetime_is_utc(self):
        """Naive datetimes are taken as UTC."""
        assert parse_timestamp(datetime(2025, 1, 1)).tzinfo == timezone.utc


class TestLoadSamples:
    """CSV snapshot loading."""

    def test_load_csv(self, tmp_path):
        """Rows load as Samples; collector filter applies."""
        path = tmp_path / "samples.csv"
        path.write_text(
            "id,sampler_id,timestamp,lat,lng,accuracy,address,chlorine,ec,ph,turbidity,notes\n"
            "1,a,2025-03-01T08:00:00Z,35.7,51.4,5,,0.4,600,7.2,,\n"
            "2,b,2025-03-01T09:00:00Z,35.8,51.5,5,,0.5,610,7.1,1.2,\n",
            encoding="utf-8",
        )
        samples = load_samples(path)
        assert [s.id for s in samples] == ["1", "2"]
        assert samples[0].metric("turbidity") is None
        assert samples[1].metric("turbidity") == 1.2

        only_b = load_samples(path, collectors=["b"])
        assert [s.collector_id for s in only_b] == ["b"]

    def test_load_csv_epoch_millis(self, tmp_path):
        """Epoch-millisecond timestamp cells load as UTC datetimes."""
        path = tmp_path / "samples.csv"
        path.write_text(
            "id,sampler_id,timestamp,lat,lng,accuracy,address,chlorine,ec,ph,turbidity,notes\n"
            "1,a,1709280000000,35.7,51.4,5,,0.4,,7.2,,\n",
            encoding="utf-8",
        )
        samples = load_samples(path)
        assert samples[0].timestamp == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
        assert samples[0].metric("chlorine") == 0.4
        assert samples[0].metric("ec") is None

    def test_missing_file(self, tmp_path):
        """A missing snapshot raises ValueError."""
        with pytest.raises(ValueError):
            load_samples(tmp_path / "nope.csv")


class TestSamplesToFrame:
    """Sample -> DataFrame."""

    def test_columns(self, sample_row):
        """One row per sample with flat metric columns."""
        frame = samples_to_frame([sample_from_record(sample_row)])
        assert frame.loc[0, "collector_id"] == "saeed_moharrari"
        assert frame.loc[0, "ec"] == 640.0
        assert "turbidity" in frame.columns
