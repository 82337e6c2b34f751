"""Tests for role-driven cell value normalization."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from tabular_consolidator.merging.value_normalizer import (
    is_null,
    is_number,
    normalize_value,
    parse_amount,
    parse_date,
    parse_integer,
)


class TestNullAndNumberChecks:
    """Tests for the null and number predicates."""

    @pytest.mark.parametrize("value", [None, "", "   ", float("nan")])
    def test_null_values(self, value: object) -> None:
        assert is_null(value) is True

    @pytest.mark.parametrize("value", [0, 0.0, False, "0", "x"])
    def test_non_null_values(self, value: object) -> None:
        assert is_null(value) is False

    def test_is_number(self) -> None:
        assert is_number(3) is True
        assert is_number(2.5) is True
        assert is_number(True) is False
        assert is_number(float("nan")) is False
        assert is_number("3") is False


class TestParseDate:
    """Tests for calendar date parsing."""

    def test_iso_string(self) -> None:
        assert parse_date("2024-01-05") == date(2024, 1, 5)

    def test_datetime_string_drops_time(self) -> None:
        assert parse_date("2024-01-05T13:45:00") == date(2024, 1, 5)

    def test_written_month(self) -> None:
        assert parse_date("March 3, 2023") == date(2023, 3, 3)

    def test_datetime_and_date_objects(self) -> None:
        assert parse_date(datetime(2022, 7, 1, 9, 30)) == date(2022, 7, 1)
        assert parse_date(date(2022, 7, 1)) == date(2022, 7, 1)

    @pytest.mark.parametrize("value", ["not a date", "13:45", "5", "", 42])
    def test_incomplete_or_invalid(self, value: object) -> None:
        assert parse_date(value) is None


class TestParseAmount:
    """Tests for monetary parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("$1,200", 1200.0),
            ("€ 99.50", 99.5),
            ("-15", -15.0),
            ("1,000,000.25", 1000000.25),
            (42, 42.0),
        ],
    )
    def test_parses(self, value: object, expected: float) -> None:
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", ["twelve", "$", "1.2.3", True])
    def test_rejects(self, value: object) -> None:
        assert parse_amount(value) is None


class TestParseInteger:
    """Tests for count parsing."""

    def test_parses(self) -> None:
        assert parse_integer("1,024") == 1024
        assert parse_integer(" 7 ") == 7
        assert parse_integer(3.0) == 3

    def test_rejects(self) -> None:
        assert parse_integer("2.5") is None
        assert parse_integer(2.5) is None
        assert parse_integer("many") is None


class TestNormalizeValue:
    """Tests for column-role dispatch."""

    def test_null_becomes_none(self) -> None:
        assert normalize_value(None, "Name") is None
        assert normalize_value("  ", "Name") is None

    def test_date_column(self) -> None:
        assert normalize_value("March 3, 2023", "Order Date") == "2023-03-03"
        assert normalize_value(datetime(2024, 2, 1, 8, 0), "created_at") == "2024-02-01"

    def test_date_normalization_is_idempotent(self) -> None:
        assert normalize_value("2024-01-05", "Date") == "2024-01-05"
        once = normalize_value("Jan 5 2024", "Updated")
        assert normalize_value(once, "Updated") == once

    def test_unparseable_date_returned_trimmed(self) -> None:
        assert normalize_value("  soon  ", "Delivery Date") == "soon"

    def test_amount_column(self) -> None:
        assert normalize_value("$1,200", "Total Amount") == 1200.0
        assert normalize_value("$500", "Revenue") == 500.0

    @pytest.mark.parametrize("column", ["Late Fee", "service_fee", "FEE"])
    def test_fee_column(self, column: str) -> None:
        assert normalize_value("$25", column) == 25.0

    @pytest.mark.parametrize("column", ["Coffee", "Feedback", "feeder_line"])
    def test_fee_inside_other_words_is_text(self, column: str) -> None:
        assert normalize_value("  Great service  ", column) == "Great service"

    def test_unparseable_amount_returned_unchanged(self) -> None:
        assert normalize_value("  n/a ", "Price") == "  n/a "

    def test_integer_column(self) -> None:
        assert normalize_value("12", "Quantity") == 12
        assert normalize_value("1,500", "item_count") == 1500

    def test_unparseable_integer_returned_unchanged(self) -> None:
        assert normalize_value("a dozen", "Qty") == "a dozen"

    def test_date_keywords_take_precedence(self) -> None:
        """A column matching several roles is treated as a date column."""
        assert normalize_value("2024-03-01", "Total Updated") == "2024-03-01"

    def test_plain_strings_trimmed(self) -> None:
        assert normalize_value("  Acme  ", "Name") == "Acme"

    def test_other_values_pass_through(self) -> None:
        assert normalize_value(7, "Score") == 7
        assert normalize_value(True, "Active") is True

    def test_column_match_is_case_insensitive(self) -> None:
        assert normalize_value("$10", "UNIT PRICE") == 10.0
