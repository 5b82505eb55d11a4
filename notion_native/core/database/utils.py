"""Row conversion helpers shared by the entity managers."""

import json
import uuid
from datetime import datetime


def convert_embedding_to_postgres(embedding: list[float]) -> str:
    """Convert a Python embedding list to the pgvector text format.

    Example:
        >>> convert_embedding_to_postgres([0.1, 0.2, 0.3])
        '[0.1,0.2,0.3]'
    """
    return "[" + ",".join(map(str, embedding)) + "]"


def parse_json_column(value) -> dict:
    """Parse a JSONB column returned as text, falling back to an empty dict.

    Example:
        >>> parse_json_column('{"key": "value"}')
        {'key': 'value'}
        >>> parse_json_column(None)
        {}
    """
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    parsed = json.loads(value)
    return parsed if isinstance(parsed, dict) else {}


def parse_uuid(uuid_str: str) -> uuid.UUID:
    """Parse a row id, raising ValueError for malformed ids."""
    return uuid.UUID(uuid_str)


def format_timestamp(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def row_to_model_data(row: dict, json_columns: tuple[str, ...] = ()) -> dict:
    """Normalize an asyncpg row dict for pydantic row models.

    UUID columns become strings, timestamps become ISO strings and the
    named JSONB columns are decoded.
    """
    data = {}
    for key, value in row.items():
        if key in json_columns:
            data[key] = parse_json_column(value)
        elif isinstance(value, uuid.UUID):
            data[key] = str(value)
        elif isinstance(value, datetime):
            data[key] = value.isoformat()
        else:
            data[key] = value
    return data


__all__ = [
    "convert_embedding_to_postgres",
    "parse_json_column",
    "parse_uuid",
    "format_timestamp",
    "row_to_model_data",
]
