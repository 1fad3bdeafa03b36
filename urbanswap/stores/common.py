"""
Helpers shared by the stores for turning asyncpg records into plain dicts.
"""

import json
import uuid


def as_uuid(value) -> uuid.UUID | None:
    """Parse an id coming from a URL or token. Malformed ids become None."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def new_id() -> uuid.UUID:
    return uuid.uuid4()


def record_to_dict(record, json_columns: tuple[str, ...] = ()) -> dict:
    """
    Convert a record to a dict with string ids.

    Columns built with json_build_object come back from asyncpg as text and
    are decoded here.
    """
    row = dict(record)
    for key, value in row.items():
        if isinstance(value, uuid.UUID):
            row[key] = str(value)
    for column in json_columns:
        if isinstance(row.get(column), str):
            row[column] = json.loads(row[column])
    return row


def like_pattern(term: str) -> str:
    """Substring pattern for ILIKE with the wildcard characters escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
