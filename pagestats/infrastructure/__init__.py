# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Adapters for external services (ports-and-adapters architecture).

This module contains concrete implementations of the base interfaces:
- repositories/ - Database adapters (PostgreSQL)
"""

from pagestats.infrastructure.repositories import (
    PostgreSQLActivityRepository,
    check_postgresql_connection,
)

__all__ = [
    "PostgreSQLActivityRepository",
    "check_postgresql_connection",
]
