# ==============================================================================
# Core Domain Logic
# ==============================================================================
"""
Pure domain logic with no external dependencies.

This module contains:
- Domain models (ViewEvent, PageRecord, EventMetric, PageDetail, ...)
- Visitor key resolution
- Session reconstruction and engagement aggregation
- Breakdowns and date range presets

All code here is framework-agnostic and easily unit-testable.
"""

from pagestats.core.breakdowns import (
    browser_breakdown,
    classify_browser,
    classify_device,
    device_breakdown,
    format_average_time,
    headline_metrics,
    page_views_trend,
    popular_pages,
)
from pagestats.core.date_ranges import DateRange, parse_range, resolve_range
from pagestats.core.ingest import parse_view_events
from pagestats.core.models import (
    AnalyticsReport,
    EngagementSummary,
    EventMetric,
    PageDetail,
    PageRecord,
    PositionedEvent,
    ReconstructionResult,
    ViewEvent,
)
from pagestats.core.session_reconstructor import SessionReconstructor
from pagestats.core.visitor import build_visitor_key

__all__ = [
    # Models
    "AnalyticsReport",
    "EngagementSummary",
    "EventMetric",
    "PageDetail",
    "PageRecord",
    "PositionedEvent",
    "ReconstructionResult",
    "ViewEvent",
    # Sessions
    "SessionReconstructor",
    "build_visitor_key",
    "parse_view_events",
    # Breakdowns
    "browser_breakdown",
    "classify_browser",
    "classify_device",
    "device_breakdown",
    "format_average_time",
    "headline_metrics",
    "page_views_trend",
    "popular_pages",
    # Date ranges
    "DateRange",
    "parse_range",
    "resolve_range",
]
