"""Unit tests for utility functions."""
import pytest
from workout_prefill_api.utils import (
    MAX_TIMER_SECONDS,
    format_seconds,
    lower_from_range,
    parse_timer_input,
    safe_positive_int,
    search_exercises,
    slugify,
    to_float,
    to_int,
)


class TestUtils:
    """Test cases for utility functions."""

    def test_to_int_valid(self):
        """Test to_int with valid input."""
        assert to_int("10") == 10
        assert to_int("0") == 0
        assert to_int("-5") == -5
        assert to_int(7.9) == 7

    def test_to_int_invalid(self):
        """Test to_int with invalid input."""
        assert to_int("abc") is None
        assert to_int("") is None
        assert to_int(None) is None
        assert to_int(True) is None

    def test_to_float(self):
        assert to_float("2.5") == 2.5
        assert to_float("nan") is None
        assert to_float("inf") is None
        assert to_float("x") is None

    def test_safe_positive_int(self):
        assert safe_positive_int("4") == 4
        assert safe_positive_int("8-10") == 8
        assert safe_positive_int("0") == 1
        assert safe_positive_int(None, default=3) == 3

    def test_lower_from_range(self):
        assert lower_from_range("8-10") == 8
        assert lower_from_range("5") == 5
        assert lower_from_range(6) == 6
        assert lower_from_range("AMRAP") is None
        assert lower_from_range(None) is None

    def test_format_seconds(self):
        assert format_seconds(0) == "0:00"
        assert format_seconds(90) == "1:30"
        assert format_seconds(59.5) == "1:00"
        assert format_seconds(-3) == "0:00"

    def test_slugify(self):
        assert slugify("Pull-Ups (weighted)") == "pull-ups-weighted"
        assert slugify("") == "exercise"


class TestTimerInput:
    """Rest-timer entry parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1:30", 90),
            ("0:45", 45),
            ("2m", 120),
            ("3min", 180),
            ("90s", 90),
            ("45sec", 45),
            ("45", 45),
            ("130", 90),
            ("0230", 150),
            ("199", 119),
            ("45:00", MAX_TIMER_SECONDS),
            ("600s", 600),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_timer_input(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", "1:2:3", "12345"])
    def test_invalid(self, raw):
        assert parse_timer_input(raw) is None


class TestSearchExercises:
    """Exercise name suggestions."""

    def test_case_insensitive_substring(self):
        results = search_exercises("SQUAT")
        assert "Back Squat" in results
        assert all("squat" in r.lower() for r in results)

    def test_limit(self):
        assert len(search_exercises("e")) == 8
        assert len(search_exercises("e", limit=3)) == 3

    def test_empty_term(self):
        assert search_exercises("") == []
        assert search_exercises(None) == []
