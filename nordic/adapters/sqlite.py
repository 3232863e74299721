"""SQLite adapters over stdlib sqlite3 and aiosqlite.

SQLite accepts numbered ``?n`` parameters bound from a positional tuple, so a
``$n`` query only needs its prefix swapped. Tables live in the ``main``
schema, e.g. ``TableMetadata(schema="main", name="articles")``.
"""

from __future__ import annotations

import sqlite3
from typing import Any

from nordic.core.connection import ConnectionConfig
from nordic.core.enums import ParamStyle
from nordic.core.params import normalize_placeholders
from nordic.core.query import ParameterizedQuery


class SqliteSyncAdapter:
    placeholder_style = ParamStyle.QMARK

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        connection = sqlite3.connect(config.database, **config.extra)
        connection.row_factory = sqlite3.Row
        return connection

    def disconnect(self, connection: sqlite3.Connection) -> None:
        connection.close()

    def run(self, connection: sqlite3.Connection, query: ParameterizedQuery) -> sqlite3.Cursor:
        sql, params = normalize_placeholders(query, self.placeholder_style)
        return connection.execute(sql, params)


class SqliteAsyncAdapter:
    """aiosqlite variant; the driver runs each connection on its own thread."""

    placeholder_style = ParamStyle.QMARK

    async def connect(self, config: ConnectionConfig) -> Any:
        import aiosqlite

        connection = await aiosqlite.connect(config.database, **config.extra)
        connection.row_factory = aiosqlite.Row
        return connection

    async def disconnect(self, connection: Any) -> None:
        await connection.close()

    async def run(self, connection: Any, query: ParameterizedQuery) -> Any:
        sql, params = normalize_placeholders(query, self.placeholder_style)
        return await connection.execute(sql, params)
