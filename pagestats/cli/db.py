# ==============================================================================
# Database Commands
# ==============================================================================
"""
Database schema commands for the pagestats CLI.
"""

from typing import Annotated

import typer

from pagestats.cli.shared import C, I, check_db_connection
from pagestats.utils.config import get_settings


# ==============================================================================
# Commands
# ==============================================================================


def db_init() -> None:
    """Create the CMS tables if they do not exist.

    Examples:
        pagestats db init
    """
    from pagestats.utils.db import ensure_schema

    settings = get_settings()
    schema_name = settings.postgres.schema_name

    if not check_db_connection():
        print(f"{C.BRIGHT_RED}{I.CROSS} PostgreSQL is not reachable{C.RESET}")
        raise typer.Exit(1)

    try:
        created = ensure_schema()
    except RuntimeError as e:
        print(f"{C.BRIGHT_RED}{I.CROSS} {e}{C.RESET}")
        raise typer.Exit(1)

    if created:
        print(f"{C.BRIGHT_GREEN}{I.CHECK} Schema '{schema_name}' initialized{C.RESET}")
    else:
        print(f"{C.BRIGHT_GREEN}{I.CHECK} Schema '{schema_name}' already exists{C.RESET}")


def db_reset(
    confirm: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt")] = False,
) -> None:
    """Drop and recreate the CMS tables (deletes all pages and activity logs).

    Examples:
        pagestats db reset       # With confirmation prompt
        pagestats db reset -y    # Skip confirmation
    """
    from pagestats.utils.db import reset_schema

    schema_name = get_settings().postgres.schema_name

    if not confirm:
        typer.confirm(f"Drop and recreate schema '{schema_name}'?", abort=True)

    if not check_db_connection():
        print(f"{C.BRIGHT_RED}{I.CROSS} PostgreSQL is not reachable{C.RESET}")
        raise typer.Exit(1)

    try:
        reset_schema()
    except RuntimeError as e:
        print(f"{C.BRIGHT_RED}{I.CROSS} {e}{C.RESET}")
        raise typer.Exit(1)

    print(f"{C.BRIGHT_GREEN}{I.CHECK} Schema '{schema_name}' reset{C.RESET}")
