"""Tests for request parameter validation."""

from datetime import date

import pytest

from budget_api.errors import InvalidParameterError
from budget_api.validation import (
    is_month,
    parse_date,
    require_date_range,
    validate_cutoff,
    validate_month,
)


class TestMonth:

    @pytest.mark.parametrize("value", ["2024-01", "1999-12"])
    def test_valid(self, value):
        """Should accept real YYYY-MM months."""
        assert is_month(value)
        assert validate_month(value) == value

    @pytest.mark.parametrize("value", ["2024-1", "abcd-ef", "2024-00", "2024-13", "2024-01\n", "２０２４-01", ""])
    def test_invalid(self, value):
        """Should reject anything that is not a real YYYY-MM month."""
        assert not is_month(value)
        with pytest.raises(InvalidParameterError):
            validate_month(value)


class TestDates:

    def test_parse_date(self):
        """Should parse a valid date, leap days included."""
        assert parse_date("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", [None, "", "2023-02-29", "2024-1-01", "2024/01/01", "2024-01-01T00:00"])
    def test_parse_date_rejects(self, value):
        """Should return None for malformed or impossible dates."""
        assert parse_date(value) is None

    def test_cutoff_optional(self):
        """Should treat a missing cutoff as latest."""
        assert validate_cutoff(None) is None

    def test_cutoff_invalid(self):
        """Should reject a malformed cutoff."""
        with pytest.raises(InvalidParameterError, match="cutoff"):
            validate_cutoff("03/01/2024")

    def test_range(self):
        """Should parse both ends of the range."""
        assert require_date_range("2024-01-01", "2024-01-31") == (date(2024, 1, 1), date(2024, 1, 31))

    def test_range_missing_one(self):
        """Should require both startDate and endDate."""
        with pytest.raises(InvalidParameterError, match="startDate and endDate"):
            require_date_range("2024-01-01", None)

    def test_range_is_not_reordered(self):
        """Should pass a reversed range on as-is so it simply matches nothing."""
        assert require_date_range("2024-02-01", "2024-01-01") == (date(2024, 2, 1), date(2024, 1, 1))
