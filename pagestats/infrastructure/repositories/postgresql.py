# ==============================================================================
# PostgreSQL Repository Implementation
# ==============================================================================
"""
PostgreSQL implementation of the activity repository.

Provides:
- PostgreSQLActivityRepository: Page views, page catalog and breakdown queries
"""

import logging
from datetime import datetime

import psycopg2
from psycopg2.extras import RealDictCursor

from pagestats.base.repositories import ActivityRepository
from pagestats.utils.config import Settings, get_settings
from pagestats.utils.retry import POSTGRES_RETRY_EXCEPTIONS, retry_light

logger = logging.getLogger(__name__)

# Connection timeout
CONNECT_TIMEOUT = 10

# Actions counted in the user activity breakdown
TRACKED_ACTIONS = ("login", "view", "create", "update", "delete")


def _add_connect_timeout(conn_string: str) -> str:
    """Add connect_timeout to connection string if not present."""
    if "connect_timeout" not in conn_string:
        separator = "&" if "?" in conn_string else "?"
        return f"{conn_string}{separator}connect_timeout={CONNECT_TIMEOUT}"
    return conn_string


class PostgreSQLActivityRepository(ActivityRepository):
    """
    PostgreSQL implementation of ActivityRepository.

    Reads the CMS `activity_logs` and `pages` tables. Page views are the
    activity rows with action 'view' and resource_type 'page'.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the activity repository.

        Args:
            settings: Application settings. If None, uses get_settings().
        """
        self._settings = settings or get_settings()
        self._conn: psycopg2.extensions.connection | None = None
        self._schema = self._settings.postgres.schema_name

    @property
    def schema(self) -> str:
        """Get the database schema name."""
        return self._schema

    @retry_light(POSTGRES_RETRY_EXCEPTIONS, logger)
    def connect(self) -> None:
        """Establish connection to PostgreSQL."""
        conn_string = _add_connect_timeout(self._settings.postgres.connection_string)
        self._conn = psycopg2.connect(conn_string)
        self._conn.set_session(readonly=True, autocommit=True)
        logger.info("PostgreSQLActivityRepository connected (schema=%s)", self._schema)

    def _cursor(self, **kwargs):
        if self._conn is None:
            raise RuntimeError("PostgreSQL connection not established. Call connect() first.")
        return self._conn.cursor(**kwargs)

    @retry_light(POSTGRES_RETRY_EXCEPTIONS, logger)
    def fetch_view_events(self, since: datetime) -> list[dict]:
        """
        Fetch page views at or after `since`, oldest first.

        Ties on created_at are broken by id so the order is deterministic.
        """
        with self._cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(
                f"""
                SELECT id, resource_id, user_id, ip_address, user_agent, created_at
                FROM {self._schema}.activity_logs
                WHERE action = 'view' AND resource_type = 'page'
                  AND created_at >= %s
                ORDER BY created_at ASC, id ASC
                """,
                (since,),
            )
            rows = [dict(row) for row in cur.fetchall()]
        logger.debug("Fetched %d view events since %s", len(rows), since.isoformat())
        return rows

    @retry_light(POSTGRES_RETRY_EXCEPTIONS, logger)
    def fetch_pages(self) -> list[dict]:
        """Fetch id, title and updated_at for every page."""
        with self._cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(f"SELECT id, title, updated_at FROM {self._schema}.pages")
            return [dict(row) for row in cur.fetchall()]

    @retry_light(POSTGRES_RETRY_EXCEPTIONS, logger)
    def fetch_action_counts(self, since: datetime) -> list[tuple[str, int]]:
        """Count activity rows per tracked action."""
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT action, COUNT(*)
                FROM {self._schema}.activity_logs
                WHERE action = ANY(%s) AND created_at >= %s
                GROUP BY action
                ORDER BY COUNT(*) DESC, action
                """,
                (list(TRACKED_ACTIONS), since),
            )
            return [(action, int(count)) for action, count in cur.fetchall()]

    @retry_light(POSTGRES_RETRY_EXCEPTIONS, logger)
    def fetch_user_agents(self, since: datetime) -> list[str]:
        """Fetch non-null user agents of activity rows at or after `since`."""
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT user_agent
                FROM {self._schema}.activity_logs
                WHERE user_agent IS NOT NULL AND created_at >= %s
                """,
                (since,),
            )
            return [row[0] for row in cur.fetchall()]

    def close(self) -> None:
        """Close connection and release resources."""
        if self._conn:
            try:
                self._conn.close()
                logger.info("PostgreSQLActivityRepository connection closed")
            except psycopg2.Error as e:
                logger.warning("Error closing connection: %s", e)
            finally:
                self._conn = None


def check_postgresql_connection(settings: Settings | None = None) -> bool:
    """
    Check if PostgreSQL is reachable.

    Args:
        settings: Application settings. If None, uses get_settings().

    Returns:
        True if connection successful, False otherwise
    """
    try:
        settings = settings or get_settings()
        conn_string = _add_connect_timeout(settings.postgres.connection_string)
        conn = psycopg2.connect(conn_string)
        conn.close()
        return True
    except psycopg2.Error:
        return False
