"""
Date canonicalization and input parsing helpers.
"""

from datetime import date, datetime

import pytest

from fieldops.time_utils import to_ymd, is_between_inclusive, to_utc_z
from fieldops.validation import ValidationError, clamp_limit, parse_positive_number, parse_optional_float


class TestToYmd:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2024-01-05", "2024-01-05"),
            ("  2024-01-05 ", "2024-01-05"),
            ("2024/01/05", "2024-01-05"),
            ("2024-01-05T23:30:00Z", "2024-01-05"),
            ("Jan 5 2024", "2024-01-05"),
            (date(2024, 1, 5), "2024-01-05"),
            (datetime(2024, 1, 5, 8, 15), "2024-01-05"),
        ],
    )
    def test_canonical_forms(self, raw, expected):
        assert to_ymd(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, "", "   ", "not a date", "2024-02-30", 20240105, ["2024-01-05"], "10", "monday", "12:30", "May", "2024-05"],
    )
    def test_unparseable_is_none(self, raw):
        assert to_ymd(raw) is None

    def test_canonical_strings_order_chronologically(self):
        days = [to_ymd("2024/12/01"), to_ymd("2024-02-10"), to_ymd("Mar 3 2023")]
        assert sorted(days) == ["2023-03-03", "2024-02-10", "2024-12-01"]


class TestRanges:

    def test_between_is_inclusive_at_both_ends(self):
        assert is_between_inclusive("2024-01-01", "2024-01-01", "2024-01-07")
        assert is_between_inclusive("2024-01-07", "2024-01-01", "2024-01-07")
        assert not is_between_inclusive("2023-12-31", "2024-01-01", "2024-01-07")
        assert not is_between_inclusive("2024-01-08", "2024-01-01", "2024-01-07")

    def test_between_missing_bound_fails(self):
        assert not is_between_inclusive("2024-01-01", None, "2024-01-07")


class TestToUtcZ:

    def test_naive_is_treated_as_utc(self):
        assert to_utc_z(datetime(2024, 1, 5, 10, 0, 0)) == "2024-01-05T10:00:00.000Z"

    def test_none(self):
        assert to_utc_z(None) is None


class TestParsePositiveNumber:

    @pytest.mark.parametrize("raw,expected", [(3, 3.0), (2.5, 2.5), ("4", 4.0), (" 1.5 ", 1.5)])
    def test_accepts_positive(self, raw, expected):
        assert parse_positive_number(raw, "quantity") == expected

    @pytest.mark.parametrize("raw", [0, -1, "0", "abc", "", None, True, float("nan"), float("inf")])
    def test_rejects(self, raw):
        with pytest.raises(ValidationError):
            parse_positive_number(raw, "quantity")

    def test_optional_float_is_lenient(self):
        assert parse_optional_float("31.5") == 31.5
        assert parse_optional_float("north") is None
        assert parse_optional_float("") is None


class TestClampLimit:

    def test_default_when_absent(self):
        assert clamp_limit(None, 30, 200) == 30
        assert clamp_limit("", 30, 200) == 30

    def test_ceiling_applies(self):
        assert clamp_limit("5000", 30, 200) == 200
        assert clamp_limit(10, 30, 200) == 10

    @pytest.mark.parametrize("raw", ["0", -3, "ten"])
    def test_invalid_limit(self, raw):
        with pytest.raises(ValidationError):
            clamp_limit(raw, 30, 200)
