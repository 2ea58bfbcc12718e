"""
Tests for shared normalization and finish time helpers.
"""

import pytest

from racehub.shared.errors import InvalidRawResultError
from racehub.shared.formatters import format_time, parse_finish_time
from racehub.shared.normalize import (
    clean_name,
    clean_location,
    display_name,
    normalize_gender,
    normalize_state,
    parse_location_city,
    parse_location_state,
)


# =============================================================================
# Test clean_name
# =============================================================================

class TestCleanName:
    """Tests for clean_name."""

    def test_lowercases_and_strips_punctuation(self):
        assert clean_name("Sarah J. Chen") == "sarah j chen"

    def test_collapses_whitespace(self):
        assert clean_name("  Marcus \t  Johnson  ") == "marcus johnson"

    def test_hyphen_and_apostrophe_removed(self):
        assert clean_name("Mary-Kate O'Brien") == "marykate obrien"

    def test_digits_removed(self):
        assert clean_name("Runner 42") == "runner"

    def test_empty_and_none(self):
        assert clean_name("") == ""
        assert clean_name(None) == ""

    def test_non_latin_degrades_to_empty(self):
        """Only a-z survive; other scripts are not supported."""
        assert clean_name("Кенжин Арман") == ""

    @pytest.mark.parametrize("name", [
        "Marcus Johnson",
        "  SARAH   j. chen ",
        "José Álvarez",
        "Mary-Kate O'Brien III",
        "\tA  b\nC ",
        "",
        "...",
    ])
    def test_idempotent(self, name):
        once = clean_name(name)
        assert clean_name(once) == once


class TestDisplayName:
    """Tests for display_name."""

    def test_title_case(self):
        assert display_name("MARCUS  johnson") == "Marcus Johnson"

    def test_punctuation_dropped(self):
        assert display_name("sarah j. chen") == "Sarah J Chen"


# =============================================================================
# Test gender / state / location
# =============================================================================

class TestNormalizeGender:
    """Tests for normalize_gender."""

    @pytest.mark.parametrize("value,expected", [
        ("F", "F"),
        ("female", "F"),
        (" Female ", "F"),
        ("M", "M"),
        ("male", "M"),
        ("X", "NB"),
        ("nonbinary", "NB"),
    ])
    def test_codes(self, value, expected):
        assert normalize_gender(value) == expected

    def test_missing_defaults_to_male(self):
        assert normalize_gender(None) == "M"
        assert normalize_gender("") == "M"
        assert normalize_gender("   ") == "M"


class TestNormalizeState:
    """Tests for normalize_state."""

    def test_full_name_to_code(self):
        assert normalize_state("California") == "CA"
        assert normalize_state("new  york") == "NY"

    def test_code_is_uppercased(self):
        assert normalize_state("tx") == "TX"

    def test_unknown_is_uppercased(self):
        assert normalize_state("Ontario") == "ONTARIO"

    def test_empty(self):
        assert normalize_state(None) == ""
        assert normalize_state("") == ""


class TestParseLocation:
    """Tests for parse_location_city / parse_location_state."""

    def test_city_and_state(self):
        assert parse_location_city("San Francisco, CA") == "San Francisco"
        assert parse_location_state("San Francisco, CA") == "CA"

    def test_city_only(self):
        assert parse_location_city("Berkeley") == "Berkeley"
        assert parse_location_state("Berkeley") is None

    def test_missing(self):
        assert parse_location_city(None) is None
        assert parse_location_state("") is None

    def test_extra_parts_ignored(self):
        assert parse_location_state("Austin, TX, USA") == "TX"

    def test_clean_location(self):
        assert clean_location("SAN FRANCISCO ") == clean_location("san francisco")


# =============================================================================
# Test finish times
# =============================================================================

class TestFinishTime:
    """Tests for parse_finish_time / format_time."""

    def test_hours_minutes_seconds(self):
        assert parse_finish_time("2:15:32") == 2 * 3600 + 15 * 60 + 32

    def test_minutes_seconds(self):
        assert parse_finish_time("45:10") == 45 * 60 + 10

    def test_long_minutes_allowed(self):
        assert parse_finish_time("75:00") == 4500

    @pytest.mark.parametrize("value", ["", None, "abc", "1:2:3:4", "10:61", "1:-5:00", "12", "1:0²", "١:00"])
    def test_invalid(self, value):
        with pytest.raises(InvalidRawResultError):
            parse_finish_time(value)

    def test_format(self):
        assert format_time(553) == "9:13"
        assert format_time(3125) == "52:05"
        assert format_time(8132) == "2:15:32"

    def test_format_parse_agree(self):
        assert parse_finish_time(format_time(8132)) == 8132
