"""Tests for the two-tailed t critical value table."""

from decimal import Decimal

import pytest

from pay_equity_engine.analysis.t_distribution import (
    MAX_TABULATED_DF,
    NORMAL_CRITICAL_VALUE,
    T_CRITICAL_VALUES,
    critical_value,
    is_significant,
)


class TestCriticalValues:
    """Test critical value lookup."""

    @pytest.mark.parametrize(
        "df,expected",
        [
            (1, "12.706"),
            (5, "2.571"),
            (10, "2.228"),
            (30, "2.042"),
            (31, "2.040"),
            (40, "2.021"),
            (60, "2.000"),
            (120, "1.980"),
        ],
    )
    def test_known_values(self, df, expected):
        assert critical_value(df) == Decimal(expected)

    def test_table_covers_every_df_to_200(self):
        assert sorted(T_CRITICAL_VALUES) == list(range(1, MAX_TABULATED_DF + 1))

    def test_non_increasing(self):
        values = [T_CRITICAL_VALUES[df] for df in range(1, MAX_TABULATED_DF + 1)]
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_converges_to_normal(self):
        assert critical_value(MAX_TABULATED_DF) > NORMAL_CRITICAL_VALUE
        assert critical_value(MAX_TABULATED_DF) - NORMAL_CRITICAL_VALUE < Decimal("0.02")
        assert critical_value(201) == NORMAL_CRITICAL_VALUE
        assert critical_value(10_000) == Decimal("1.960")

    def test_df_below_one_rejected(self):
        with pytest.raises(ValueError):
            critical_value(0)


class TestIsSignificant:
    """Test the significance decision."""

    def test_two_tailed(self):
        assert is_significant(Decimal("2.6"), 5) is True
        assert is_significant(Decimal("-2.6"), 5) is True
        assert is_significant(Decimal("2.5"), 5) is False

    def test_equal_to_critical_is_not_significant(self):
        assert is_significant(Decimal("2.571"), 5) is False
