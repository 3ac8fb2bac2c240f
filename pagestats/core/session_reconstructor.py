# ==============================================================================
# Session Reconstructor - Pure Domain Logic
# ==============================================================================
"""
Rebuild visiting sessions from page-view events that carry no session id.

This module contains the domain logic for engagement analytics:
- Visitor session assignment by inactivity timeout
- Dwell time estimation from the next view in the same session
- Overall and per-page aggregation (bounce rate, average time, visitors)

The work is split into two sequential passes. Session identity for an event
is only final once every earlier event of the same visitor has been scanned,
and an event's dwell time depends on the *next* event in its session, so the
first pass is completed and frozen before the second pass starts.

Everything here is pure: no database, cache, or framework dependencies, and
no state shared between calls.
"""

import logging
import math
from collections import defaultdict
from collections.abc import Iterable, Sequence

from pagestats.core.models import (
    EngagementSummary,
    EventMetric,
    PageDetail,
    PageRecord,
    PositionedEvent,
    ReconstructionResult,
    ViewEvent,
    to_epoch_ms,
)
from pagestats.core.visitor import build_visitor_key

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MINUTES = 30
DEFAULT_LAST_EVENT_SECONDS = 30
DEFAULT_MIN_DWELL_SECONDS = 1
DEFAULT_MAX_DWELL_SECONDS = 1800
DEFAULT_PAGE_DETAILS_LIMIT = 20


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (not banker's rounding)."""
    return math.floor(value + 0.5)


class _PageAggregate:
    """Running per-resource totals used while building page details."""

    __slots__ = ("views", "duration_sum", "visitors", "bounce_hits")

    def __init__(self) -> None:
        self.views = 0
        self.duration_sum = 0
        self.visitors: set[str] = set()
        self.bounce_hits = 0


class SessionReconstructor:
    """
    Session reconstruction and engagement aggregation.

    Sessions are identified as "{visitor_key}-{session_index}", where the
    index starts at 1 and increments whenever a visitor's gap between
    consecutive views exceeds the inactivity timeout.
    """

    def __init__(
        self,
        timeout_minutes: int = DEFAULT_TIMEOUT_MINUTES,
        last_event_seconds: int = DEFAULT_LAST_EVENT_SECONDS,
        min_dwell_seconds: int = DEFAULT_MIN_DWELL_SECONDS,
        max_dwell_seconds: int = DEFAULT_MAX_DWELL_SECONDS,
        page_details_limit: int = DEFAULT_PAGE_DETAILS_LIMIT,
    ):
        """
        Initialize the reconstructor.

        Args:
            timeout_minutes: Inactivity gap (exclusive) that starts a new session
            last_event_seconds: Dwell time given to the last view of a session
            min_dwell_seconds: Lower clamp for computed dwell times
            max_dwell_seconds: Upper clamp for computed dwell times
            page_details_limit: Maximum number of page details returned
        """
        self.timeout_ms = timeout_minutes * 60 * 1000
        self.last_event_seconds = last_event_seconds
        self.min_dwell_seconds = min_dwell_seconds
        self.max_dwell_seconds = max_dwell_seconds
        self.page_details_limit = page_details_limit

    def is_new_session(self, last_ms: int | None, event_ms: int) -> bool:
        """True if the visitor has no prior view or the gap exceeds the timeout."""
        if last_ms is None:
            return True
        return event_ms - last_ms > self.timeout_ms

    def dwell_seconds(self, current_ms: int, next_ms: int | None) -> int:
        """Estimated seconds spent on a page before the next view in the session."""
        if next_ms is None:
            return self.last_event_seconds
        seconds = round_half_up((next_ms - current_ms) / 1000)
        return min(self.max_dwell_seconds, max(self.min_dwell_seconds, seconds))

    # --------------------------------------------------------------------------
    # Pass 1
    # --------------------------------------------------------------------------

    def assign_sessions(
        self, events: Sequence[ViewEvent]
    ) -> tuple[tuple[PositionedEvent, ...], dict[str, int]]:
        """
        Assign every event to a session.

        Events must be in ascending time order; the visitor's running state
        (last view time, session index) carries forward event by event.

        Returns:
            Tuple of (positioned events in input order, page count per session)
        """
        visitor_state: dict[str, tuple[int | None, int]] = {}
        session_page_counts: dict[str, int] = {}
        positioned: list[PositionedEvent] = []

        for event in events:
            visitor_key = build_visitor_key(event)
            occurred_ms = event.occurred_ms
            last_ms, session_index = visitor_state.get(visitor_key, (None, 0))

            if self.is_new_session(last_ms, occurred_ms):
                session_index += 1
            visitor_state[visitor_key] = (occurred_ms, session_index)

            session_id = f"{visitor_key}-{session_index}"
            session_page_counts[session_id] = session_page_counts.get(session_id, 0) + 1

            positioned.append(
                PositionedEvent(
                    event_id=event.event_id,
                    resource_id=event.resource_id,
                    visitor_key=visitor_key,
                    session_id=session_id,
                    occurred_ms=occurred_ms,
                )
            )

        return tuple(positioned), session_page_counts

    # --------------------------------------------------------------------------
    # Pass 2
    # --------------------------------------------------------------------------

    def compute_durations(self, positioned: Iterable[PositionedEvent]) -> list[EventMetric]:
        """
        Compute a dwell time for every positioned event.

        Output is grouped by session, sessions in order of first appearance,
        views within a session in time order.
        """
        sessions: dict[str, list[PositionedEvent]] = {}
        for event in positioned:
            sessions.setdefault(event.session_id, []).append(event)

        metrics: list[EventMetric] = []
        for session_events in sessions.values():
            session_events.sort(key=lambda e: e.occurred_ms)
            for i, current in enumerate(session_events):
                following = session_events[i + 1] if i + 1 < len(session_events) else None
                duration = self.dwell_seconds(
                    current.occurred_ms,
                    following.occurred_ms if following else None,
                )
                metrics.append(
                    EventMetric(
                        event_id=current.event_id,
                        resource_id=current.resource_id,
                        visitor_key=current.visitor_key,
                        session_id=current.session_id,
                        duration_seconds=duration,
                    )
                )
        return metrics

    # --------------------------------------------------------------------------
    # Aggregation
    # --------------------------------------------------------------------------

    @staticmethod
    def summarize(
        event_metrics: Sequence[EventMetric], session_page_counts: dict[str, int]
    ) -> EngagementSummary:
        """Build the overall engagement summary."""
        total_sessions = len(session_page_counts)
        total_page_views = len(event_metrics)
        unique_visitors = len({m.visitor_key for m in event_metrics})
        avg_duration = (
            sum(m.duration_seconds for m in event_metrics) / total_page_views
            if total_page_views > 0
            else 0.0
        )
        single_page_sessions = sum(1 for count in session_page_counts.values() if count == 1)
        bounce_ratio = single_page_sessions / total_sessions if total_sessions > 0 else 0.0

        return EngagementSummary(
            total_sessions=total_sessions,
            total_page_views=total_page_views,
            unique_visitors=unique_visitors,
            avg_duration_seconds=avg_duration,
            single_page_sessions=single_page_sessions,
            bounce_ratio=bounce_ratio,
        )

    def build_page_details(
        self,
        event_metrics: Sequence[EventMetric],
        session_page_counts: dict[str, int],
        pages: Iterable[PageRecord] | None = None,
    ) -> list[PageDetail]:
        """
        Roll event metrics up per page.

        With a catalog, every catalog page is listed (zero metrics when it has
        no views) and views of unknown resources are ignored. Without one,
        the resources seen in the events are listed.
        """
        aggregates: dict[int | str, _PageAggregate] = defaultdict(_PageAggregate)
        for metric in event_metrics:
            agg = aggregates[metric.resource_id]
            agg.views += 1
            agg.duration_sum += metric.duration_seconds
            agg.visitors.add(metric.visitor_key)
            if session_page_counts.get(metric.session_id, 0) == 1:
                agg.bounce_hits += 1

        if pages is None:
            catalog = [PageRecord(id=resource_id) for resource_id in aggregates]
        else:
            catalog = list(pages)

        details = []
        for page in catalog:
            agg = aggregates.get(page.id) or _PageAggregate()
            views = agg.views
            details.append(
                PageDetail(
                    page_id=page.id,
                    title=page.title,
                    views=views,
                    unique_visitors=len(agg.visitors),
                    avg_time=agg.duration_sum / views if views > 0 else 0.0,
                    bounce_rate=round_half_up(100 * agg.bounce_hits / views) if views > 0 else 0,
                    updated_at=page.updated_at,
                )
            )

        # Most viewed first; ties go to the most recently updated page
        details.sort(
            key=lambda d: (
                -d.views,
                -to_epoch_ms(d.updated_at) if d.updated_at else math.inf,
            )
        )
        return details[: self.page_details_limit]

    # --------------------------------------------------------------------------
    # Entry point
    # --------------------------------------------------------------------------

    def reconstruct(
        self,
        events: Sequence[ViewEvent],
        pages: Iterable[PageRecord] | None = None,
    ) -> ReconstructionResult:
        """
        Reconstruct sessions and compute engagement metrics.

        Args:
            events: View events for one reporting range, ascending by time.
                    Out-of-order input is logged and sorted (stable) first.
            pages: Page catalog to left-join into page details, or None to
                   list only the pages that received views

        Returns:
            ReconstructionResult with event metrics, session page counts,
            the engagement summary and the top page details
        """
        ordered = self._ensure_time_order(events)

        positioned, session_page_counts = self.assign_sessions(ordered)
        event_metrics = self.compute_durations(positioned)
        summary = self.summarize(event_metrics, session_page_counts)
        page_details = self.build_page_details(event_metrics, session_page_counts, pages)

        logger.debug(
            "Reconstructed %d sessions from %d views (%d visitors)",
            summary.total_sessions,
            summary.total_page_views,
            summary.unique_visitors,
        )

        return ReconstructionResult(
            event_metrics=event_metrics,
            session_page_counts=session_page_counts,
            summary=summary,
            page_details=page_details,
        )

    @staticmethod
    def _ensure_time_order(events: Sequence[ViewEvent]) -> Sequence[ViewEvent]:
        previous_ms = None
        for event in events:
            occurred_ms = event.occurred_ms
            if previous_ms is not None and occurred_ms < previous_ms:
                logger.warning("View events are not in time order; sorting %d events", len(events))
                return sorted(events, key=lambda e: e.occurred_ms)
            previous_ms = occurred_ms
        return events
