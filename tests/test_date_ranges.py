# ==============================================================================
# Tests for Reporting Date Ranges
# ==============================================================================

import logging
from datetime import datetime, timedelta, timezone

import pytest

from pagestats.core.date_ranges import DEFAULT_RANGE, DateRange, parse_range, resolve_range

NOW = datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)


class TestParseRange:
    @pytest.mark.parametrize(
        "key,expected",
        [
            ("24h", DateRange.LAST_24_HOURS),
            ("7days", DateRange.LAST_7_DAYS),
            ("30days", DateRange.LAST_30_DAYS),
            ("90days", DateRange.LAST_90_DAYS),
        ],
    )
    def test_known_keys(self, key, expected):
        assert parse_range(key) is expected

    def test_enum_passthrough(self):
        assert parse_range(DateRange.LAST_30_DAYS) is DateRange.LAST_30_DAYS

    def test_unknown_key_falls_back_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_range("fortnight") is DEFAULT_RANGE
        assert any("fortnight" in r.getMessage() for r in caplog.records)

    def test_none_falls_back(self):
        assert parse_range(None) is DateRange.LAST_7_DAYS


class TestResolveRange:
    @pytest.mark.parametrize(
        "key,days", [("24h", 1), ("7days", 7), ("30days", 30), ("90days", 90)]
    )
    def test_window_start(self, key, days):
        date_range, since = resolve_range(key, now=NOW)
        assert date_range.value == key
        assert since == NOW - timedelta(days=days)

    def test_defaults_to_current_time(self):
        before = datetime.now(timezone.utc)
        _, since = resolve_range("24h")
        assert before - timedelta(days=1, seconds=5) <= since <= datetime.now(timezone.utc)
