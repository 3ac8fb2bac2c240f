# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for pagestats.

Commands are organized into separate modules for maintainability:
- shared.py: Common utilities, constants, and helpers
- analytics.py: Engagement analytics report
- config.py: Configuration display
- db.py: Schema initialization and reset
"""

from pagestats.cli.shared import (
    BOX_WIDTH,
    B,
    Box,
    C,
    Colors,
    I,
    Icons,
    check_db_connection,
)

__all__ = [
    "BOX_WIDTH",
    "B",
    "Box",
    "C",
    "Colors",
    "I",
    "Icons",
    "check_db_connection",
]
