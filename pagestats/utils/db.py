# ==============================================================================
# Database Utilities
# ==============================================================================
"""
Database utility functions for CMS analytics.

Provides schema initialization and the analytics report query.
Includes retry logic with exponential backoff for network resilience.
"""

import logging
from datetime import datetime
from pathlib import Path

import psycopg2
from jinja2 import Template

from pagestats.base.repositories import ActivityRepository
from pagestats.core.breakdowns import (
    action_breakdown,
    browser_breakdown,
    device_breakdown,
    headline_metrics,
    page_views_trend,
    popular_pages,
)
from pagestats.core.date_ranges import DateRange, resolve_range
from pagestats.core.ingest import parse_view_events
from pagestats.core.models import AnalyticsReport, PageRecord
from pagestats.core.session_reconstructor import SessionReconstructor
from pagestats.utils.config import Settings, get_settings
from pagestats.utils.paths import get_init_sql_path
from pagestats.utils.retry import POSTGRES_RETRY_EXCEPTIONS, retry_standard

logger = logging.getLogger(__name__)


def get_schema_file() -> Path | None:
    """Get the schema init.sql path, or None if not found."""
    path = get_init_sql_path()
    if path.exists():
        return path
    # Fallback to current directory
    cwd_path = Path.cwd() / "schema" / "init.sql"
    if cwd_path.exists():
        return cwd_path
    return None


def render_schema_sql(schema_name: str) -> str:
    """Render the schema SQL template with the given schema name."""
    schema_file = get_schema_file()
    if not schema_file:
        raise RuntimeError(
            "Schema file (schema/init.sql) not found. "
            "Make sure you're running from the project root."
        )

    template = Template(schema_file.read_text())
    return template.render(schema_name=schema_name)


@retry_standard(POSTGRES_RETRY_EXCEPTIONS, logger)
def check_schema_exists() -> bool:
    """Check if the activity_logs table exists in the configured schema."""
    settings = get_settings()
    with psycopg2.connect(settings.postgres.connection_string, connect_timeout=5) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT EXISTS (
                    SELECT FROM information_schema.tables
                    WHERE table_schema = %s
                    AND table_name = 'activity_logs'
                )
                """,
                (settings.postgres.schema_name,),
            )
            result = cur.fetchone()
            return result[0] if result else False


def ensure_schema() -> bool:
    """
    Ensure database schema exists, initializing if needed.

    This function is idempotent and safe to call multiple times.

    Returns:
        True if the schema was created, False if it already existed

    Raises:
        RuntimeError: If schema file not found or initialization fails
    """
    if check_schema_exists():
        return False

    schema_name = get_settings().postgres.schema_name
    logger.info("Initializing database schema '%s'...", schema_name)
    _execute_schema_sql(drop_first=False)
    logger.info("Database schema '%s' initialized.", schema_name)
    return True


def reset_schema() -> None:
    """
    Drop and recreate the database schema.

    WARNING: This deletes all pages and activity logs in the schema!
    """
    _execute_schema_sql(drop_first=True)


def _execute_schema_sql(drop_first: bool) -> None:
    settings = get_settings()
    schema_name = settings.postgres.schema_name

    try:
        schema_sql = render_schema_sql(schema_name)
        with psycopg2.connect(settings.postgres.connection_string) as conn:
            with conn.cursor() as cur:
                if drop_first:
                    cur.execute(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE")
                cur.execute(schema_sql)
            conn.commit()
    except (psycopg2.Error, OSError) as e:
        raise RuntimeError(f"Failed to initialize schema: {e}") from e


def build_reconstructor(settings: Settings | None = None) -> SessionReconstructor:
    """Create a SessionReconstructor from analytics settings."""
    analytics = (settings or get_settings()).analytics
    return SessionReconstructor(
        timeout_minutes=analytics.session_timeout_minutes,
        last_event_seconds=analytics.last_event_seconds,
        min_dwell_seconds=analytics.min_dwell_seconds,
        max_dwell_seconds=analytics.max_dwell_seconds,
        page_details_limit=analytics.page_details_limit,
    )


def get_analytics_report(
    range_key: str | DateRange | None = None,
    repository: ActivityRepository | None = None,
    now: datetime | None = None,
) -> AnalyticsReport | None:
    """
    Build the analytics report for a date range.

    Fetches page views and the page catalog, reconstructs sessions and adds
    the trend and breakdown counts.

    Args:
        range_key: "24h", "7days", "30days" or "90days" (default from settings)
        repository: Activity repository. If None, a PostgreSQL repository is used.
        now: Reference time for the range window (defaults to current time)

    Returns:
        AnalyticsReport, or None if the data could not be fetched.
        An empty range yields a zeroed report, not None.
    """
    settings = get_settings()
    date_range, since = resolve_range(range_key or settings.analytics.default_range, now)

    if repository is None:
        from pagestats.infrastructure.repositories import PostgreSQLActivityRepository

        repository = PostgreSQLActivityRepository(settings)

    try:
        with repository:
            view_rows = repository.fetch_view_events(since)
            page_rows = repository.fetch_pages()
            action_counts = repository.fetch_action_counts(since)
            user_agents = repository.fetch_user_agents(since)
    except Exception as e:
        logger.error("Analytics fetch failed: %s", e)
        return None

    events, skipped = parse_view_events(view_rows)
    pages = [PageRecord.model_validate(row) for row in page_rows]

    result = build_reconstructor(settings).reconstruct(events, pages)

    logger.info(
        "Analytics report %s: %d sessions, %d page views, %d visitors",
        date_range.value,
        result.summary.total_sessions,
        result.summary.total_page_views,
        result.summary.unique_visitors,
    )

    return AnalyticsReport(
        range=date_range.value,
        since=since,
        summary=result.summary,
        metrics=headline_metrics(result.summary),
        page_details=result.page_details,
        page_views_trend=page_views_trend(events),
        popular_pages=popular_pages(events, pages, limit=settings.analytics.popular_pages_limit),
        user_activity=action_breakdown(action_counts),
        device_stats=device_breakdown(user_agents),
        browser_stats=browser_breakdown(user_agents),
        skipped_events=skipped,
    )
