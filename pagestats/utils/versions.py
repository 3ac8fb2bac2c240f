# ==============================================================================
# Version Utilities
# ==============================================================================
"""
Utilities for retrieving package versions.
"""

from importlib.metadata import version, PackageNotFoundError


def get_pagestats_version() -> str:
    """
    Get the pagestats package version.

    Returns:
        Version string (e.g., "0.1.0")
    """
    try:
        return version("pagestats")
    except PackageNotFoundError:
        return "0.1.0"
