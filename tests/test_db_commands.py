# ==============================================================================
# Tests for Database Schema Commands
# ==============================================================================
"""
Unit tests for `pagestats db init` / `pagestats db reset` and schema rendering.

Connection checks and schema execution are mocked, so no PostgreSQL server
is needed.
"""

from unittest.mock import patch

import typer
from typer.testing import CliRunner

from pagestats.cli.db import db_init, db_reset
from pagestats.utils.db import render_schema_sql

runner = CliRunner()

_CHECK_PATH = "pagestats.cli.db.check_db_connection"
_ENSURE_PATH = "pagestats.utils.db.ensure_schema"
_RESET_PATH = "pagestats.utils.db.reset_schema"


def _make_app():
    """Create a minimal Typer app with db commands for testing."""
    app = typer.Typer()
    app.command("init")(db_init)
    app.command("reset")(db_reset)
    return app


class TestRenderSchema:
    def test_schema_name_substituted(self):
        sql = render_schema_sql("tenant_a")
        assert "CREATE SCHEMA IF NOT EXISTS tenant_a" in sql
        assert "tenant_a.activity_logs" in sql
        assert "tenant_a.pages" in sql
        assert "{{" not in sql


class TestDbInit:
    def test_creates_schema(self):
        with patch(_CHECK_PATH, return_value=True), patch(_ENSURE_PATH, return_value=True):
            result = runner.invoke(_make_app(), ["init"])

        assert result.exit_code == 0
        assert "initialized" in result.output

    def test_existing_schema(self):
        with patch(_CHECK_PATH, return_value=True), patch(_ENSURE_PATH, return_value=False):
            result = runner.invoke(_make_app(), ["init"])

        assert result.exit_code == 0
        assert "already exists" in result.output

    def test_unreachable(self):
        with patch(_CHECK_PATH, return_value=False), patch(_ENSURE_PATH) as mock_ensure:
            result = runner.invoke(_make_app(), ["init"])

        assert result.exit_code == 1
        assert "not reachable" in result.output
        mock_ensure.assert_not_called()

    def test_failure_exits_1(self):
        with (
            patch(_CHECK_PATH, return_value=True),
            patch(_ENSURE_PATH, side_effect=RuntimeError("Failed to initialize schema: boom")),
        ):
            result = runner.invoke(_make_app(), ["init"])

        assert result.exit_code == 1
        assert "boom" in result.output


class TestDbReset:
    def test_reset_with_yes(self):
        with patch(_CHECK_PATH, return_value=True), patch(_RESET_PATH) as mock_reset:
            result = runner.invoke(_make_app(), ["reset", "-y"])

        assert result.exit_code == 0
        mock_reset.assert_called_once()
        assert "reset" in result.output

    def test_declined_confirmation_aborts(self):
        with patch(_CHECK_PATH, return_value=True), patch(_RESET_PATH) as mock_reset:
            result = runner.invoke(_make_app(), ["reset"], input="n\n")

        assert result.exit_code == 1
        mock_reset.assert_not_called()
