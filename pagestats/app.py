# ==============================================================================
# Pagestats CLI
# ==============================================================================
"""
Command-line interface for CMS page-view analytics.

Usage:
    pagestats --help
    pagestats analytics --range 30days
    pagestats analytics --json
    pagestats config show
    pagestats db init
    pagestats db reset -y
"""

import logging
import os
from typing import Annotated

import typer

from pagestats.utils.config import get_settings
from pagestats.utils.versions import get_pagestats_version

# ==============================================================================
# App Configuration
# ==============================================================================
# Set consistent terminal width for help output formatting
if "COLUMNS" not in os.environ:
    os.environ["COLUMNS"] = "115"

app = typer.Typer(
    name="pagestats",
    help="CMS page-view analytics CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        print(f"pagestats {get_pagestats_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
        ),
    ] = False,
) -> None:
    """CMS page-view analytics CLI."""
    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Suppress noisy third-party loggers
    logging.getLogger("psycopg2").setLevel(logging.WARNING)


# Analytics command is imported from pagestats.cli.analytics
from pagestats.cli.analytics import show_analytics

app.command("analytics")(show_analytics)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

# Register config commands from cli.config module
from pagestats.cli.config import config_show

config_app.command("show")(config_show)

db_app = typer.Typer(
    help="Database schema operations",
    no_args_is_help=True,
)
app.add_typer(db_app, name="db")

# Register db commands from cli.db module
from pagestats.cli.db import db_init, db_reset

db_app.command("init")(db_init)
db_app.command("reset")(db_reset)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
