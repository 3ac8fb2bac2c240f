# ==============================================================================
# Visitor Key Resolution
# ==============================================================================
"""
Heuristic visitor identity for page-view events.

Activity rows carry no session cookie, so a visitor is identified by the
first available of: user id, IP address, hashed user agent. Distinct people
behind one IP (or with no identifying data at all) collapse into one key.
"""

import hashlib

from pagestats.core.models import ViewEvent

UNKNOWN_VISITOR = "unknown"
USER_AGENT_PREFIX = "ua:"
USER_AGENT_HASH_LENGTH = 12


def hash_user_agent(user_agent: str) -> str:
    """Return the stable 12 hex character MD5 fragment of a user agent."""
    digest = hashlib.md5(user_agent.encode("utf-8")).hexdigest()
    return f"{USER_AGENT_PREFIX}{digest[:USER_AGENT_HASH_LENGTH]}"


def build_visitor_key(event: ViewEvent) -> str:
    """
    Resolve the visitor key for an event.

    Priority: user id > IP address > "ua:" + hashed user agent > "unknown".
    Empty values are treated as missing.
    """
    if event.user_id:
        return str(event.user_id)
    if event.ip_address:
        return str(event.ip_address)
    if event.user_agent:
        return hash_user_agent(event.user_agent)
    return UNKNOWN_VISITOR
