"""Tests for date token parsing."""

from datetime import date
from unittest.mock import patch

import pytest

from finance_assistant.ingest.dates import (
    find_first_date,
    match_date_token,
    parse_date_token,
    parse_date_value,
    parse_flexible_date,
)

TODAY = date(2030, 6, 1)


@pytest.fixture
def fixed_today():
    with patch("finance_assistant.ingest.dates._today", return_value=TODAY):
        yield TODAY


class TestMatchDateToken:
    """Test match_date_token."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Date: 03/15/2024", date(2024, 3, 15)),
            ("03-15-2024 10:22", date(2024, 3, 15)),
            ("Printed 2024-01-05", date(2024, 1, 5)),
            ("1/5/24", date(2024, 1, 5)),
            ("12-31-99", date(1999, 12, 31)),
        ],
    )
    def test_supported_shapes(self, text, expected):
        """Test each supported date shape."""
        assert match_date_token(text) == expected

    def test_invalid_calendar_date(self):
        """Test that a date-shaped token that is not a real date is rejected."""
        assert match_date_token("13/45/2024") is None

    def test_no_date(self):
        """Test text without a date."""
        assert match_date_token("THANK YOU") is None


class TestFallbacks:
    """Test the fall back to today's date."""

    def test_parse_date_token_fallback(self, fixed_today):
        """Test that unparseable text yields today."""
        assert parse_date_token("no date here") == fixed_today

    def test_find_first_date_uses_first_valid_line(self, fixed_today):
        """Test that the earliest line with a valid date wins."""
        lines = ["STORE", "99/99/2024", "Date 01/02/2024", "Printed 05/06/2024"]
        assert find_first_date(lines) == date(2024, 1, 2)

    def test_find_first_date_without_dates(self, fixed_today):
        """Test the fallback when no line holds a date."""
        assert find_first_date(["STORE", "TOTAL 5.00"]) == fixed_today


class TestParseDateValue:
    """Test whole-value date parsing used for CSV columns and API input."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2024-03-15", date(2024, 3, 15)),
            ("2024-03-15T10:30:00Z", date(2024, 3, 15)),
            ("3/15/2024", date(2024, 3, 15)),
            ("2024/03/15", date(2024, 3, 15)),
            ("Jan 15, 2024", date(2024, 1, 15)),
            ("January 15, 2024", date(2024, 1, 15)),
            ("15 Jan 2024", date(2024, 1, 15)),
        ],
    )
    def test_formats(self, value, expected):
        """Test the accepted whole-value formats."""
        assert parse_date_value(value) == expected

    @pytest.mark.parametrize("value", ["garbage", "", "   "])
    def test_unparseable(self, value):
        """Test values that are not dates."""
        assert parse_date_value(value) is None

    def test_flexible_date_scans_for_token(self, fixed_today):
        """Test that a date embedded in text is found."""
        assert parse_flexible_date("Posted 3/15/2024 at branch") == date(2024, 3, 15)

    def test_flexible_date_fallback(self, fixed_today):
        """Test that garbage falls back to today."""
        assert parse_flexible_date("n/a") == fixed_today
