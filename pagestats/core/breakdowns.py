# ==============================================================================
# Analytics Breakdowns
# ==============================================================================
"""
Grouped counts that accompany the engagement metrics in a report.

These are independent of session reconstruction:
- Page views per day
- Most viewed pages
- Device type and browser histograms from user agent strings
- Dashboard headline metrics and time formatting
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import timezone

from pagestats.core.models import (
    BreakdownRow,
    EngagementSummary,
    HeadlineMetrics,
    PageRecord,
    PopularPage,
    TrendPoint,
    ViewEvent,
)
from pagestats.core.session_reconstructor import round_half_up

DEVICE_MOBILE = "mobile"
DEVICE_TABLET = "tablet"
DEVICE_DESKTOP = "desktop"

BROWSER_OTHER = "other"

# Checked in order; "Chrome" appears in Edge and "Safari" in Chrome user agents
_BROWSER_MARKERS = ("Chrome", "Firefox", "Safari", "Edge")


def classify_device(user_agent: str) -> str:
    """Classify a user agent as mobile, tablet or desktop."""
    if "Mobile" in user_agent and "iPad" not in user_agent:
        return DEVICE_MOBILE
    if "iPad" in user_agent or ("Android" in user_agent and "Mobile" not in user_agent):
        return DEVICE_TABLET
    if "Tablet" in user_agent:
        return DEVICE_TABLET
    return DEVICE_DESKTOP


def classify_browser(user_agent: str) -> str:
    """Classify a user agent by browser family."""
    for marker in _BROWSER_MARKERS:
        if marker in user_agent:
            return marker
    return BROWSER_OTHER


def _counts_to_rows(counts: Counter) -> list[BreakdownRow]:
    return [BreakdownRow(name=name, count=count) for name, count in counts.most_common()]


def device_breakdown(user_agents: Iterable[str | None]) -> list[BreakdownRow]:
    """Count user agents per device type, ignoring missing user agents."""
    return _counts_to_rows(Counter(classify_device(ua) for ua in user_agents if ua is not None))


def browser_breakdown(user_agents: Iterable[str | None]) -> list[BreakdownRow]:
    """Count user agents per browser, ignoring missing user agents."""
    return _counts_to_rows(Counter(classify_browser(ua) for ua in user_agents if ua is not None))


def action_breakdown(action_counts: Iterable[tuple[str, int]]) -> list[BreakdownRow]:
    """Turn (action, count) pairs into breakdown rows."""
    return [BreakdownRow(name=action, count=int(count)) for action, count in action_counts]


def page_views_trend(events: Iterable[ViewEvent]) -> list[TrendPoint]:
    """Page views per UTC calendar day, oldest day first."""
    per_day: Counter = Counter()
    for event in events:
        occurred_at = event.occurred_at
        if occurred_at.tzinfo is not None:
            occurred_at = occurred_at.astimezone(timezone.utc)
        per_day[occurred_at.date()] += 1
    return [TrendPoint(date=day, views=per_day[day]) for day in sorted(per_day)]


def popular_pages(
    events: Iterable[ViewEvent], pages: Sequence[PageRecord], limit: int = 10
) -> list[PopularPage]:
    """Catalog pages with at least one view, most viewed first."""
    views = Counter(event.resource_id for event in events)
    ranked = [
        PopularPage(page_id=page.id, title=page.title, view_count=views[page.id])
        for page in pages
        if views[page.id] > 0
    ]
    ranked.sort(key=lambda p: -p.view_count)
    return ranked[:limit]


def format_average_time(seconds: float) -> str:
    """Format seconds as m:ss ("0:00" for empty or non-positive values)."""
    if not seconds or seconds <= 0:
        return "0:00"
    minutes = int(seconds // 60)
    remaining = int(seconds % 60)
    return f"{minutes}:{remaining:02d}"


def headline_metrics(summary: EngagementSummary) -> HeadlineMetrics:
    """Dashboard headline numbers for an engagement summary."""
    return HeadlineMetrics(
        total_visits=summary.total_sessions,
        unique_visitors=summary.unique_visitors,
        page_views=summary.total_page_views,
        avg_time_on_page=format_average_time(summary.avg_duration_seconds),
        bounce_rate=round_half_up(summary.bounce_ratio * 100) if summary.bounce_ratio else 0,
    )
