"""
AquaGuard - Digit Pattern Unit Tests

Tests Benford, last-digit and value-frequency screens.
"""

import math

import pytest

from aquaguard.forensics.digits import (
    benford_chi_square,
    benford_deviation,
    benford_distribution,
    digit_preference_score,
    first_digit,
    last_digit_distribution,
    round_for_frequency,
    value_frequency,
)


def benford_values(total=1000):
    """Values whose leading digits follow log10(1 + 1/d)."""
    values = []
    for d in range(1, 10):
        count = round(total * math.log10(1 + 1 / d))
        values.extend([d * 10 + 3] * count)
    return values


class TestFirstDigit:
    """First significant digit extraction."""

    @pytest.mark.parametrize("value,expected", [
        (123.4, 1),
        (0.00456, 4),
        (-250, 2),
        (907, 9),
        (1e-7, 1),
    ])
    def test_first_digit(self, value, expected):
        assert first_digit(value) == expected

    def test_zero_has_no_digit(self):
        """Zero yields no usable digit."""
        assert first_digit(0.0) is None


class TestBenford:
    """Benford first-digit distribution."""

    def test_expected_percentages(self):
        """Expected series is Benford's Law for digits 1-9."""
        dist = benford_distribution([1, 2, 3])
        assert [f.digit for f in dist] == list(range(1, 10))
        assert [f.expected for f in dist] == [30.1, 17.6, 12.5, 9.7, 7.9, 6.7, 5.8, 5.1, 4.6]

    def test_benford_data_matches(self):
        """Benford-distributed data stays within a few points of expected."""
        dist = benford_distribution(benford_values())
        for f in dist:
            assert abs(f.actual - f.expected) < 1.0
        assert benford_deviation(dist) < 5

    def test_uniform_digits_deviate(self):
        """Uniform leading digits cluster near 11.1% and deviate strongly."""
        values = [d * 100 + 7 for d in range(1, 10)] * 20
        dist = benford_distribution(values)
        for f in dist:
            assert f.actual == pytest.approx(100 / 9)
        assert benford_deviation(dist) > 40

    def test_no_usable_digits(self):
        """Only zeros and absent values give an empty series."""
        assert benford_distribution([0, 0.0, None]) == []

    def test_chi_square_flags_uniform(self):
        """Uniform first digits fail the chi-square test."""
        values = [d * 100 + 7 for d in range(1, 10)] * 20
        result = benford_chi_square(values)
        assert result.is_anomaly is True
        assert result.p_value < 0.05

    def test_chi_square_accepts_benford(self):
        """Benford-distributed data passes the chi-square test."""
        result = benford_chi_square(benford_values())
        assert result.is_anomaly is False
        assert result.sample_size == len(benford_values())

    def test_chi_square_returns_builtin_types(self):
        """Statistic and verdict are plain Python values."""
        result = benford_chi_square([d * 100 + 7 for d in range(1, 10)] * 20)
        assert type(result.statistic) is float
        assert type(result.is_anomaly) is bool

    def test_chi_square_needs_data(self):
        """Fewer than 30 digits is reported, not flagged."""
        result = benford_chi_square([1, 2, 3])
        assert result.is_anomaly is False
        assert result.p_value is None
        assert "Insufficient" in result.description


class TestLastDigit:
    """Second-decimal digit distribution."""

    def test_reads_second_decimal(self):
        """7.25 ends in 5, 3 ends in 0."""
        dist = last_digit_distribution([7.25, 3])
        by_digit = {f.digit: f.actual for f in dist}
        assert by_digit[5] == 50.0
        assert by_digit[0] == 50.0
        assert all(f.expected == 10.0 for f in dist)

    def test_uniform_scores_100(self):
        """Perfectly uniform last digits score 100."""
        values = [1 + d / 100 for d in range(10)]
        dist = last_digit_distribution(values)
        assert digit_preference_score(dist) == pytest.approx(100.0)

    def test_rounded_values_penalized(self):
        """All values ending in 0 score 0: deviation 90 + 9 * 10 = 180."""
        dist = last_digit_distribution([1.5, 2.0, 3.1, 4.7])
        assert digit_preference_score(dist) == 0.0

    def test_empty(self):
        """No values, no series."""
        assert last_digit_distribution([]) == []

    def test_empty_scores_zero(self):
        """An empty series earns no preference score."""
        assert digit_preference_score(last_digit_distribution([])) == 0.0


class TestValueFrequency:
    """Rounded value frequency per collector."""

    def test_rounding_rules(self):
        """EC to 50, pH/chlorine to 0.1, others to integers."""
        assert round_for_frequency(1234, "ec") == 1250
        assert round_for_frequency(7.26, "ph") == 7.3
        assert round_for_frequency(0.44, "chlorine") == 0.4
        assert round_for_frequency(3.6, "turbidity") == 4.0

    def test_table(self, sample_factory):
        """One column per collector, zeros where a value was never reported."""
        samples = [
            sample_factory("1", "a", ph=7.21),
            sample_factory("2", "a", ph=7.19),
            sample_factory("3", "b", ph=6.8),
            sample_factory("4", "b"),
            sample_factory("5", "ghost", ph=7.2),
        ]
        table = value_frequency(samples, "ph", ["a", "b"])
        assert list(table.columns) == ["a", "b"]
        assert list(table.index) == [6.8, 7.2]
        assert table.loc[7.2, "a"] == 2
        assert table.loc[7.2, "b"] == 0
        assert table.loc[6.8, "b"] == 1
