# ==============================================================================
# Page Analytics Domain Models
# ==============================================================================
"""
Pydantic models for page-view events, reconstructed sessions and reports.

These models are used for:
- Validating activity-log rows read from PostgreSQL
- Carrying the immutable hand-off between the session reconstruction passes
- Serializing analytics reports to JSON

This module is part of the core domain layer and has no external dependencies
beyond Pydantic.
"""

from datetime import date, datetime, timedelta, timezone

from pydantic import BaseModel, Field

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_ms(value: datetime) -> int:
    """Convert a datetime to integer milliseconds since the Unix epoch.

    Naive datetimes are interpreted as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // timedelta(milliseconds=1)


class ViewEvent(BaseModel):
    """
    A single page view taken from the activity log.

    Attributes:
        event_id: Activity log row identifier (traceability only)
        resource_id: Identifier of the page viewed
        user_id: Authenticated user, if any
        ip_address: Client IP address, if recorded
        user_agent: Client user agent, if recorded
        occurred_at: When the view happened
    """

    event_id: int | str | None = Field(None, alias="id", description="Activity log row id")
    resource_id: int | str = Field(..., description="Page identifier")
    user_id: int | str | None = Field(None, description="User identifier (nullable)")
    ip_address: str | None = Field(None, description="Client IP address (nullable)")
    user_agent: str | None = Field(None, description="Client user agent (nullable)")
    occurred_at: datetime = Field(..., alias="created_at", description="View timestamp")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def occurred_ms(self) -> int:
        """Timestamp in milliseconds since epoch."""
        return to_epoch_ms(self.occurred_at)


class PageRecord(BaseModel):
    """A page from the CMS catalog."""

    id: int | str = Field(..., description="Page identifier")
    title: str | None = Field(None, description="Page title")
    updated_at: datetime | None = Field(None, description="Last modification time")

    model_config = {"frozen": True}


class PositionedEvent(BaseModel):
    """A view event placed in its session by the first reconstruction pass."""

    event_id: int | str | None = None
    resource_id: int | str
    visitor_key: str
    session_id: str
    occurred_ms: int

    model_config = {"frozen": True}


class EventMetric(BaseModel):
    """A view event annotated with its session and estimated dwell time."""

    event_id: int | str | None = None
    resource_id: int | str
    visitor_key: str
    session_id: str
    duration_seconds: int

    model_config = {"frozen": True}


class EngagementSummary(BaseModel):
    """Totals across all reconstructed sessions."""

    total_sessions: int = 0
    total_page_views: int = 0
    unique_visitors: int = 0
    avg_duration_seconds: float = 0.0
    single_page_sessions: int = 0
    bounce_ratio: float = 0.0


class PageDetail(BaseModel):
    """Per-page engagement rollup."""

    page_id: int | str
    title: str | None = None
    views: int = 0
    unique_visitors: int = 0
    avg_time: float = 0.0
    bounce_rate: int = Field(0, description="Bounce rate in whole percent")
    updated_at: datetime | None = None


class ReconstructionResult(BaseModel):
    """Everything produced by one SessionReconstructor.reconstruct() call."""

    event_metrics: list[EventMetric] = Field(default_factory=list)
    session_page_counts: dict[str, int] = Field(default_factory=dict)
    summary: EngagementSummary = Field(default_factory=EngagementSummary)
    page_details: list[PageDetail] = Field(default_factory=list)


# ==============================================================================
# Report Models
# ==============================================================================


class TrendPoint(BaseModel):
    """Page views on one calendar day."""

    date: date
    views: int


class PopularPage(BaseModel):
    """A page ranked by raw view count."""

    page_id: int | str
    title: str | None = None
    view_count: int


class BreakdownRow(BaseModel):
    """A labelled count (action, device type or browser)."""

    name: str
    count: int


class HeadlineMetrics(BaseModel):
    """Dashboard headline numbers derived from the engagement summary."""

    total_visits: int = 0
    unique_visitors: int = 0
    page_views: int = 0
    avg_time_on_page: str = "0:00"
    bounce_rate: int = 0


class AnalyticsReport(BaseModel):
    """
    Complete analytics response for one date range.

    The engagement summary and page details come from session reconstruction;
    the trend and breakdowns are independent grouped counts.
    """

    range: str
    since: datetime
    summary: EngagementSummary
    metrics: HeadlineMetrics
    page_details: list[PageDetail] = Field(default_factory=list)
    page_views_trend: list[TrendPoint] = Field(default_factory=list)
    popular_pages: list[PopularPage] = Field(default_factory=list)
    user_activity: list[BreakdownRow] = Field(default_factory=list)
    device_stats: list[BreakdownRow] = Field(default_factory=list)
    browser_stats: list[BreakdownRow] = Field(default_factory=list)
    skipped_events: int = Field(0, description="Rows rejected as malformed")

    def to_json_dict(self) -> dict:
        """Serialize for JSON output."""
        return self.model_dump(mode="json")
