# ==============================================================================
# Base Abstract Classes
# ==============================================================================
"""
Abstract base classes defining the contracts for the ports-and-adapters architecture.

The analytics core never touches storage; it consumes rows supplied through
these interfaces.
"""

from pagestats.base.repositories import ActivityRepository

__all__ = [
    "ActivityRepository",
]
