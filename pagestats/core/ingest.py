# ==============================================================================
# View Event Ingest
# ==============================================================================
"""
Validation of raw activity-log rows into ViewEvent models.

Rows with a missing or unparsable timestamp, or no resource id, would corrupt
the ordering-sensitive session reconstruction. They are skipped with a
warning instead of failing the whole report.
"""

import logging
from collections.abc import Iterable, Mapping

from pydantic import ValidationError

from pagestats.core.models import ViewEvent

logger = logging.getLogger(__name__)


def parse_view_events(rows: Iterable[Mapping]) -> tuple[list[ViewEvent], int]:
    """
    Validate activity rows into view events.

    Args:
        rows: Mappings with id, resource_id, user_id, ip_address,
              user_agent and created_at keys

    Returns:
        Tuple of (valid events in input order, count of skipped rows)
    """
    events: list[ViewEvent] = []
    skipped = 0

    for row in rows:
        try:
            events.append(ViewEvent.model_validate(row))
        except ValidationError as e:
            skipped += 1
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            logger.warning("Skipping malformed view event id=%s (%s)", row.get("id"), fields)

    if skipped:
        logger.warning("Skipped %d of %d view events", skipped, skipped + len(events))

    return events, skipped
