"""
Domain converters between Supabase rows and the session domain models.

All converters are pure functions with no side effects.

Examples:
    >>> from domain.converters import db_row_to_session
    >>> session = db_row_to_session({
    ...     "id": "s1", "user_id": "u1", "status": "IN_PROGRESS",
    ...     "started_at": "2024-05-01T10:00:00Z",
    ... })
    >>> session.is_active
    True
"""

from domain.converters.db_converters import (
    db_payload_to_graph,
    db_row_to_exercise,
    db_row_to_session,
    db_row_to_set,
    db_row_to_template,
    graph_to_summary,
    set_update_to_db_row,
)

__all__ = [
    "db_row_to_session",
    "db_row_to_exercise",
    "db_row_to_set",
    "db_row_to_template",
    "db_payload_to_graph",
    "graph_to_summary",
    "set_update_to_db_row",
]
