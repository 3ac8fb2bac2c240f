# ==============================================================================
# Database Repository Adapters
# ==============================================================================
"""
Database adapters implementing the repository interfaces from base/repositories.py.

Currently supported:
- PostgreSQL (postgresql.py)
"""

from pagestats.infrastructure.repositories.postgresql import (
    PostgreSQLActivityRepository,
    check_postgresql_connection,
)

__all__ = [
    "PostgreSQLActivityRepository",
    "check_postgresql_connection",
]
