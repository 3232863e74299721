"""Running compiled queries on a driver connection.

Shared by the engines and the transaction managers: the adapter binds and
executes the query, and the cursor is drained into plain dicts. Driver errors surface as
``QueryExecutionError`` with the original exception chained.
"""

from __future__ import annotations

import logging
from typing import Any

from nordic.core.exceptions import QueryExecutionError
from nordic.core.query import ParameterizedQuery
from nordic.core.transform import KeyTransform, transform_row_keys

logger = logging.getLogger(__name__)


def _zip_rows(columns: list[str], rows: list[Any]) -> list[dict[str, Any]]:
    """Handles both tuple-like rows and dict-like rows from different adapters."""
    if not rows:
        return []
    # Check if rows are already dict-like (e.g., psycopg dict_row)
    if isinstance(rows[0], dict):
        return [dict(row) for row in rows]
    return [dict(zip(columns, row, strict=True)) for row in rows]


def execute_on_connection(
    adapter: Any,
    connection: Any,
    query: ParameterizedQuery,
    key_transform: KeyTransform | None = None,
) -> list[dict[str, Any]]:
    """Execute *query* on *connection* and return its rows as dicts."""
    logger.debug("Executing %s with %d value(s)", query.text, len(query.values))
    try:
        cursor = adapter.run(connection, query)
        if cursor.description is None:
            return []
        columns = [desc[0] for desc in cursor.description]
        rows = _zip_rows(columns, cursor.fetchall())
    except Exception as e:
        raise QueryExecutionError(query.text, str(e)) from e
    return transform_row_keys(rows, key_transform)


async def execute_on_connection_async(
    adapter: Any,
    connection: Any,
    query: ParameterizedQuery,
    key_transform: KeyTransform | None = None,
) -> list[dict[str, Any]]:
    """Async variant of :func:`execute_on_connection`."""
    logger.debug("Executing %s with %d value(s)", query.text, len(query.values))
    try:
        cursor = await adapter.run(connection, query)
        if cursor.description is None:
            return []
        columns = [desc[0] for desc in cursor.description]
        rows = _zip_rows(columns, await cursor.fetchall())
    except Exception as e:
        raise QueryExecutionError(query.text, str(e)) from e
    return transform_row_keys(rows, key_transform)


def commit(connection: Any, query: ParameterizedQuery) -> None:
    """Commit after *query*; deferred constraint failures surface here."""
    try:
        connection.commit()
    except Exception as e:
        raise QueryExecutionError(query.text, f"commit failed: {e}") from e


async def commit_async(connection: Any, query: ParameterizedQuery) -> None:
    try:
        await connection.commit()
    except Exception as e:
        raise QueryExecutionError(query.text, f"commit failed: {e}") from e
