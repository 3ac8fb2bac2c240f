# ==============================================================================
# Tests for CLI Analytics Command
# ==============================================================================
"""
Unit tests for the `pagestats analytics` and `pagestats config show` commands.

Tests cover:
- Range option validation
- Formatted output (metrics box, breakdowns, page table, no pages)
- JSON mode (success envelope and fetch failure)

All tests mock get_analytics_report so no PostgreSQL connection is needed.
CLI output is captured via typer.testing.CliRunner.
"""

import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from pagestats.cli.analytics import _validate_range, show_analytics
from pagestats.cli.config import config_show
from pagestats.core.models import (
    AnalyticsReport,
    BreakdownRow,
    EngagementSummary,
    HeadlineMetrics,
    PageDetail,
)

runner = CliRunner()

# Path to mock in the analytics CLI module (where it is imported)
_REPORT_PATH = "pagestats.cli.analytics.get_analytics_report"


def _make_app():
    """Create a minimal Typer app with the analytics and config commands."""
    app = typer.Typer()
    app.command("analytics")(show_analytics)
    app.command("config")(config_show)
    return app


def _report(page_details=None, skipped_events=0) -> AnalyticsReport:
    return AnalyticsReport(
        range="7days",
        since=datetime(2024, 3, 1, tzinfo=timezone.utc),
        summary=EngagementSummary(
            total_sessions=3,
            total_page_views=5,
            unique_visitors=2,
            avg_duration_seconds=58.0,
            single_page_sessions=1,
            bounce_ratio=1 / 3,
        ),
        metrics=HeadlineMetrics(
            total_visits=3,
            unique_visitors=2,
            page_views=5,
            avg_time_on_page="0:58",
            bounce_rate=33,
        ),
        page_details=page_details
        if page_details is not None
        else [
            PageDetail(page_id=1, title="Home", views=4, unique_visitors=1, avg_time=65.0),
            PageDetail(
                page_id=2, title="About", views=1, unique_visitors=1, avg_time=30.0, bounce_rate=100
            ),
        ],
        device_stats=[BreakdownRow(name="desktop", count=4)],
        browser_stats=[BreakdownRow(name="Firefox", count=4)],
        user_activity=[BreakdownRow(name="view", count=5)],
        skipped_events=skipped_events,
    )


# ==============================================================================
# _validate_range
# ==============================================================================


class TestValidateRange:
    """Tests for the --range option callback."""

    def test_none_passes_through(self):
        assert _validate_range(None) is None

    def test_known_range(self):
        assert _validate_range("30days") == "30days"

    def test_unknown_range_raises(self):
        with pytest.raises(typer.BadParameter, match="Invalid range"):
            _validate_range("1year")

    def test_invalid_range_exit_code(self):
        result = runner.invoke(_make_app(), ["analytics", "--range", "1year"])
        assert result.exit_code == 2


# ==============================================================================
# analytics (formatted)
# ==============================================================================


class TestAnalyticsFormatted:
    """Tests for human-readable output."""

    def test_metrics_box(self):
        with patch(_REPORT_PATH, return_value=_report()):
            result = runner.invoke(_make_app(), ["analytics"])

        assert result.exit_code == 0
        assert "PAGE ANALYTICS (7days)" in result.output
        assert "Visits (sessions)" in result.output
        assert "0:58" in result.output
        assert "33%" in result.output

    def test_breakdown_sections(self):
        with patch(_REPORT_PATH, return_value=_report()):
            result = runner.invoke(_make_app(), ["analytics"])

        assert "Devices" in result.output
        assert "Browsers" in result.output
        assert "User Activity" in result.output
        assert "Firefox" in result.output

    def test_page_table(self):
        with patch(_REPORT_PATH, return_value=_report()):
            result = runner.invoke(_make_app(), ["analytics"])

        assert "Top Pages" in result.output
        assert "Home" in result.output
        assert "1:05" in result.output
        assert "100%" in result.output

    def test_top_limits_rows(self):
        with patch(_REPORT_PATH, return_value=_report()):
            result = runner.invoke(_make_app(), ["analytics", "--top", "1"])

        assert "Home" in result.output
        assert "About" not in result.output

    def test_no_pages(self):
        with patch(_REPORT_PATH, return_value=_report(page_details=[])):
            result = runner.invoke(_make_app(), ["analytics"])

        assert result.exit_code == 0
        assert "No pages found" in result.output

    def test_skipped_events_reported(self):
        with patch(_REPORT_PATH, return_value=_report(skipped_events=2)):
            result = runner.invoke(_make_app(), ["analytics"])

        assert "2 malformed events skipped" in result.output

    def test_range_passed_through(self):
        with patch(_REPORT_PATH, return_value=_report()) as mock_report:
            runner.invoke(_make_app(), ["analytics", "-r", "90days"])

        mock_report.assert_called_once_with("90days")

    def test_fetch_failure(self):
        with patch(_REPORT_PATH, return_value=None):
            result = runner.invoke(_make_app(), ["analytics"])

        assert result.exit_code == 1
        assert "Analytics fetch failed" in result.output


# ==============================================================================
# analytics --json
# ==============================================================================


class TestAnalyticsJson:
    """Tests for JSON output mode."""

    def test_success_envelope(self):
        with patch(_REPORT_PATH, return_value=_report()):
            result = runner.invoke(_make_app(), ["analytics", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["success"] is True
        assert data["data"]["summary"]["total_sessions"] == 3
        assert data["data"]["page_details"][0]["title"] == "Home"

    def test_failure_envelope(self):
        with patch(_REPORT_PATH, return_value=None):
            result = runner.invoke(_make_app(), ["analytics", "-j"])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data == {"success": False, "message": "analytics fetch failed"}


# ==============================================================================
# config show
# ==============================================================================


class TestConfigShow:
    """Tests for `config show`."""

    def test_json_masks_password(self, monkeypatch):
        from pagestats.utils.config import get_settings

        monkeypatch.setenv("PG_PASSWORD", "hunter2")
        get_settings.cache_clear()
        try:
            result = runner.invoke(_make_app(), ["config", "--json"])
        finally:
            monkeypatch.delenv("PG_PASSWORD")
            get_settings.cache_clear()

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["postgresql"]["password"] == "********"
        assert "hunter2" not in result.output
        assert data["analytics"]["session_timeout_minutes"] == 30

    def test_human_readable(self):
        result = runner.invoke(_make_app(), ["config"])

        assert result.exit_code == 0
        assert "Session timeout" in result.output
        assert "30 min" in result.output
