# ==============================================================================
# Repository Abstract Base Classes
# ==============================================================================
"""
Repository ABCs for reading CMS activity data.

These define the "what" (the rows analytics needs) not the "how" (SQL).
Concrete implementations in infrastructure/ handle the specifics.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class ActivityRepository(ABC):
    """Read access to page views, the page catalog and activity breakdowns."""

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the data store."""
        ...

    @abstractmethod
    def fetch_view_events(self, since: datetime) -> list[dict]:
        """
        Fetch page-view rows at or after `since`.

        Rows must be ordered ascending by created_at.

        Returns:
            List of dicts with keys: id, resource_id, user_id, ip_address,
            user_agent, created_at
        """
        ...

    @abstractmethod
    def fetch_pages(self) -> list[dict]:
        """
        Fetch the page catalog.

        Returns:
            List of dicts with keys: id, title, updated_at
        """
        ...

    @abstractmethod
    def fetch_action_counts(self, since: datetime) -> list[tuple[str, int]]:
        """Count activity rows per action (login, view, create, update, delete)."""
        ...

    @abstractmethod
    def fetch_user_agents(self, since: datetime) -> list[str]:
        """Fetch the non-null user agents of all activity rows at or after `since`."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close connection and release resources."""
        ...

    def __enter__(self) -> "ActivityRepository":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
