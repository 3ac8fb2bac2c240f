# ==============================================================================
# Pagestats Utilities
# ==============================================================================
"""
Shared utilities for CMS analytics.

This module exports configuration and database helpers.
"""

from pagestats.utils.config import (
    AnalyticsSettings,
    PostgresSettings,
    Settings,
    get_settings,
)
from pagestats.utils.db import (
    ensure_schema,
    get_analytics_report,
    reset_schema,
)

__all__ = [
    # Config
    "AnalyticsSettings",
    "PostgresSettings",
    "Settings",
    "get_settings",
    # Database
    "ensure_schema",
    "get_analytics_report",
    "reset_schema",
]
