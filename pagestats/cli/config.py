# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration commands for the pagestats CLI.
"""

import json
from typing import Annotated

import typer

from pagestats.cli.shared import C
from pagestats.utils.config import get_settings


# ==============================================================================
# Commands
# ==============================================================================


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display current configuration (password is masked)."""
    settings = get_settings()
    password = "********" if settings.postgres.password else ""

    # JSON output mode
    if json_output:
        config = {
            "postgresql": {
                "host": settings.postgres.host,
                "port": settings.postgres.port,
                "database": settings.postgres.database,
                "schema": settings.postgres.schema_name,
                "user": settings.postgres.user,
                "password": password,
                "sslmode": settings.postgres.sslmode,
            },
            "analytics": settings.analytics.model_dump(),
            "log_level": settings.log_level,
        }
        print(json.dumps(config, indent=2))
        return

    analytics = settings.analytics

    # Human-readable output
    print()
    print(f"{C.BOLD}Configuration{C.RESET}")
    print()

    print(f"{C.CYAN}PostgreSQL{C.RESET}")
    print(f"  Host:       {C.WHITE}{settings.postgres.host}:{settings.postgres.port}{C.RESET}")
    print(f"  Database:   {C.WHITE}{settings.postgres.database}{C.RESET}")
    print(f"  Schema:     {C.WHITE}{settings.postgres.schema_name}{C.RESET}")
    print(f"  User:       {C.WHITE}{settings.postgres.user}{C.RESET}")
    print(f"  SSL mode:   {C.WHITE}{settings.postgres.sslmode}{C.RESET}")
    print()

    print(f"{C.CYAN}Analytics{C.RESET}")
    print(f"  Session timeout:   {C.WHITE}{analytics.session_timeout_minutes} min{C.RESET}")
    print(
        f"  Dwell time:        {C.WHITE}{analytics.min_dwell_seconds}-"
        f"{analytics.max_dwell_seconds}s (last view {analytics.last_event_seconds}s){C.RESET}"
    )
    print(f"  Page details:      {C.WHITE}top {analytics.page_details_limit}{C.RESET}")
    print(f"  Popular pages:     {C.WHITE}top {analytics.popular_pages_limit}{C.RESET}")
    print(f"  Default range:     {C.WHITE}{analytics.default_range}{C.RESET}")
    print()
