# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- Builders for view events and catalog pages at fixed offsets from a base time
- An in-memory ActivityRepository for report tests without PostgreSQL
"""

from datetime import datetime, timedelta, timezone

import pytest

from pagestats.base.repositories import ActivityRepository
from pagestats.core.models import PageRecord, ViewEvent

BASE_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_event(
    visitor: str | None,
    page: int | str,
    seconds: float,
    event_id: int | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> ViewEvent:
    """Build a view event `seconds` after BASE_TIME for a user id visitor."""
    return ViewEvent(
        event_id=event_id,
        resource_id=page,
        user_id=visitor,
        ip_address=ip_address,
        user_agent=user_agent,
        occurred_at=BASE_TIME + timedelta(seconds=seconds),
    )


def make_page(page_id: int | str, title: str | None = None, updated_days: float | None = 0):
    """Build a catalog page updated `updated_days` after BASE_TIME (None for unknown)."""
    updated_at = None if updated_days is None else BASE_TIME + timedelta(days=updated_days)
    return PageRecord(id=page_id, title=title or f"Page {page_id}", updated_at=updated_at)


class InMemoryActivityRepository(ActivityRepository):
    """ActivityRepository serving fixed rows, recording connect/close calls."""

    def __init__(
        self,
        view_rows: list[dict] | None = None,
        page_rows: list[dict] | None = None,
        action_counts: list[tuple[str, int]] | None = None,
        user_agents: list[str] | None = None,
        fail_with: Exception | None = None,
    ):
        self.view_rows = view_rows or []
        self.page_rows = page_rows or []
        self.action_counts = action_counts or []
        self.user_agents = user_agents or []
        self.fail_with = fail_with
        self.connected = False
        self.closed = False
        self.since_values: list[datetime] = []

    def connect(self) -> None:
        self.connected = True

    def fetch_view_events(self, since: datetime) -> list[dict]:
        if self.fail_with is not None:
            raise self.fail_with
        self.since_values.append(since)
        return [row for row in self.view_rows if row["created_at"] >= since]

    def fetch_pages(self) -> list[dict]:
        return list(self.page_rows)

    def fetch_action_counts(self, since: datetime) -> list[tuple[str, int]]:
        return list(self.action_counts)

    def fetch_user_agents(self, since: datetime) -> list[str]:
        return list(self.user_agents)

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def end_to_end_events():
    """Two visitors: u1 with two sessions of two views, u2 with a single view."""
    return [
        make_event("u1", "p1", 0),
        make_event("u2", "p2", 50),
        make_event("u1", "p1", 100),
        make_event("u1", "p1", 2000),
        make_event("u1", "p1", 2100),
    ]


@pytest.fixture()
def catalog():
    """Catalog with the two pages used by end_to_end_events plus an unvisited page."""
    return [
        make_page("p1", "Home", updated_days=1),
        make_page("p2", "About", updated_days=2),
        make_page("p3", "Contact", updated_days=3),
    ]
