"""Query execution engine.

The Engine runs compiled ``$n`` queries and ``:name`` templates through the
adapter, applies the optional row key transform, and hands out query
builders and repositories for tables registered in the database metadata.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from nordic.core.builder import QueryBuilder
from nordic.core.connection import AsyncConnectionManager, ConnectionConfig, ConnectionManager
from nordic.core.exceptions import MetadataError, QueryExecutionError
from nordic.core.executor import (
    commit,
    commit_async,
    execute_on_connection,
    execute_on_connection_async,
)
from nordic.core.metadata import DatabaseMetadata, TableMetadata
from nordic.core.params import rewrite_named_params
from nordic.core.query import ParameterizedQuery, PropertiesMapping
from nordic.core.transaction import AsyncTransactionManager, TransactionManager
from nordic.core.transform import KeyTransform
from nordic.repository.base import AsyncRepository, Repository


class _TableResolver:
    """Resolves table keys against the engine's metadata."""

    _metadata: DatabaseMetadata | None

    def resolve_table(self, table: str | TableMetadata) -> TableMetadata:
        """Return *table* as TableMetadata, looking string keys up in the metadata.

        Raises:
            MetadataError: If a key is given and no metadata was loaded.
            TableNotFoundError: If the key is not registered.
        """
        if isinstance(table, TableMetadata):
            return table
        if self._metadata is None:
            raise MetadataError(f"No database metadata loaded to resolve table '{table}'")
        return self._metadata.table(table)

    def query_builder(
        self,
        table: str | TableMetadata,
        properties_mapping: PropertiesMapping | None = None,
    ) -> QueryBuilder:
        """Create a QueryBuilder for a table key or TableMetadata."""
        return QueryBuilder(self.resolve_table(table), properties_mapping)


class Engine(_TableResolver):
    """Synchronous query execution engine.

    Args:
        connection_manager: Pool-backed connection manager.
        metadata: Optional table registry used to resolve table keys.
        key_transform: Optional function applied to every result row key,
            e.g. :func:`nordic.core.transform.to_camel_case`.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        metadata: DatabaseMetadata | None = None,
        key_transform: KeyTransform | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        self._metadata = metadata
        self._key_transform = key_transform

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        metadata: DatabaseMetadata | None = None,
        key_transform: KeyTransform | None = None,
    ) -> Engine:
        """Create an Engine from a ConnectionConfig."""
        return cls(ConnectionManager(config), metadata, key_transform)

    @property
    def metadata(self) -> DatabaseMetadata | None:
        return self._metadata

    def execute_query(self, query: ParameterizedQuery) -> list[dict[str, Any]]:
        """Execute a compiled query and commit. Returns result rows, if any."""
        with self._connection_manager.get_connection() as conn:
            try:
                rows = execute_on_connection(
                    self._connection_manager.adapter, conn, query, self._key_transform
                )
                commit(conn, query)
            except QueryExecutionError:
                conn.rollback()
                raise
        return rows

    def raw_query(
        self,
        template: str,
        named_values: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Rewrite a ``:name`` template to positional SQL and execute it."""
        return self.execute_query(rewrite_named_params(template, named_values))

    def repository(
        self,
        table: str | TableMetadata,
        properties_mapping: PropertiesMapping | None = None,
    ) -> Repository:
        """Create a Repository bound to this engine."""
        return Repository(self, self.resolve_table(table), properties_mapping)

    def transaction(self) -> TransactionManager:
        """Create a new transaction context manager."""
        return TransactionManager(self._connection_manager, self._key_transform)

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._connection_manager.close()


class AsyncEngine(_TableResolver):
    """Asynchronous query execution engine."""

    def __init__(
        self,
        connection_manager: AsyncConnectionManager,
        metadata: DatabaseMetadata | None = None,
        key_transform: KeyTransform | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        self._metadata = metadata
        self._key_transform = key_transform

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        metadata: DatabaseMetadata | None = None,
        key_transform: KeyTransform | None = None,
    ) -> AsyncEngine:
        """Create an AsyncEngine from a ConnectionConfig."""
        return cls(AsyncConnectionManager(config), metadata, key_transform)

    @property
    def metadata(self) -> DatabaseMetadata | None:
        return self._metadata

    async def execute_query(self, query: ParameterizedQuery) -> list[dict[str, Any]]:
        """Execute a compiled query asynchronously and commit."""
        async with self._connection_manager.get_connection() as conn:
            try:
                rows = await execute_on_connection_async(
                    self._connection_manager.adapter, conn, query, self._key_transform
                )
                await commit_async(conn, query)
            except QueryExecutionError:
                await conn.rollback()
                raise
        return rows

    async def raw_query(
        self,
        template: str,
        named_values: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Rewrite a ``:name`` template to positional SQL and execute it."""
        return await self.execute_query(rewrite_named_params(template, named_values))

    def repository(
        self,
        table: str | TableMetadata,
        properties_mapping: PropertiesMapping | None = None,
    ) -> AsyncRepository:
        """Create an AsyncRepository bound to this engine."""
        return AsyncRepository(self, self.resolve_table(table), properties_mapping)

    def transaction(self) -> AsyncTransactionManager:
        """Create a new async transaction context manager."""
        return AsyncTransactionManager(self._connection_manager, self._key_transform)

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._connection_manager.close()
