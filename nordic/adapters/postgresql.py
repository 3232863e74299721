"""PostgreSQL adapters over psycopg 3.

psycopg binds ``%s`` rather than ``$n``: queries are rewritten with the
``format`` style, which re-orders values by occurrence and doubles literal
``%``. Rows come back as dicts through ``dict_row``.
"""

from __future__ import annotations

from typing import Any

from nordic.core.connection import ConnectionConfig
from nordic.core.enums import ParamStyle
from nordic.core.exceptions import ConnectionError  # noqa: A004
from nordic.core.params import normalize_placeholders
from nordic.core.query import ParameterizedQuery


def connect_kwargs(config: ConnectionConfig) -> dict[str, Any]:
    """libpq keyword arguments for *config*; unset fields are left to libpq defaults."""
    kwargs = {
        "host": config.host,
        "port": config.port,
        "user": config.user,
        "password": config.password,
        "dbname": config.database,
    }
    kwargs = {key: value for key, value in kwargs.items() if value is not None}
    kwargs.update(config.extra)
    return kwargs


class PostgresqlSyncAdapter:
    placeholder_style = ParamStyle.FORMAT

    def connect(self, config: ConnectionConfig) -> Any:
        import psycopg
        from psycopg.rows import dict_row

        try:
            return psycopg.connect(row_factory=dict_row, **connect_kwargs(config))
        except psycopg.OperationalError as e:
            raise ConnectionError(f"Cannot connect to {config.database}: {e}") from e

    def disconnect(self, connection: Any) -> None:
        connection.close()

    def run(self, connection: Any, query: ParameterizedQuery) -> Any:
        sql, params = normalize_placeholders(query, self.placeholder_style)
        return connection.execute(sql, params)


class PostgresqlAsyncAdapter:
    placeholder_style = ParamStyle.FORMAT

    async def connect(self, config: ConnectionConfig) -> Any:
        import psycopg
        from psycopg.rows import dict_row

        try:
            return await psycopg.AsyncConnection.connect(
                row_factory=dict_row, **connect_kwargs(config)
            )
        except psycopg.OperationalError as e:
            raise ConnectionError(f"Cannot connect to {config.database}: {e}") from e

    async def disconnect(self, connection: Any) -> None:
        await connection.close()

    async def run(self, connection: Any, query: ParameterizedQuery) -> Any:
        sql, params = normalize_placeholders(query, self.placeholder_style)
        return await connection.execute(sql, params)
