"""Repository base classes.

Thin per-table wrappers over QueryBuilder and an executor. Any object with
``execute_query(ParameterizedQuery) -> list[dict]`` works as the executor:
an Engine, or a TransactionManager to run inside a transaction.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from nordic.core.builder import QueryBuilder
from nordic.core.exceptions import MultipleRowsError
from nordic.core.metadata import TableMetadata
from nordic.core.query import PropertiesMapping

Row = dict[str, Any]


def _single(table: TableMetadata, rows: list[Row]) -> Row | None:
    if len(rows) > 1:
        raise MultipleRowsError(table.qualified_name, len(rows))
    return rows[0] if rows else None


def _scalar(rows: list[Row]) -> int:
    # Row keys may have been transformed, so read the first column by position
    if not rows:
        return 0
    return int(next(iter(rows[0].values())))


class Repository:
    """Synchronous table repository.

    Args:
        executor: Engine or TransactionManager.
        table: Target table.
        properties_mapping: Optional column -> expression function mapping.
    """

    def __init__(
        self,
        executor: Any,
        table: TableMetadata,
        properties_mapping: PropertiesMapping | None = None,
    ) -> None:
        self.executor = executor
        self.table = table
        self.builder = QueryBuilder(table, properties_mapping)

    def find(self, conditions: Mapping[str, Any] | None = None) -> list[Row]:
        return self.executor.execute_query(self.builder.select_query(conditions))

    def find_one(self, conditions: Mapping[str, Any]) -> Row | None:
        """Return the only matching row, or None.

        Raises:
            MultipleRowsError: If more than one row matches.
        """
        return _single(self.table, self.find(conditions))

    def count(self, conditions: Mapping[str, Any] | None = None) -> int:
        return _scalar(self.executor.execute_query(self.builder.select_count_query(conditions)))

    def create(self, records: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> list[Row]:
        """Insert one or more records and return the inserted rows."""
        return self.executor.execute_query(self.builder.insert_query(records))

    def update(
        self,
        values: Mapping[str, Any],
        conditions: Mapping[str, Any] | None = None,
    ) -> list[Row]:
        """Update matching rows and return them."""
        return self.executor.execute_query(self.builder.update_query(values, conditions))

    def delete(self, conditions: Mapping[str, Any] | None = None) -> list[Row]:
        """Delete matching rows and return them."""
        return self.executor.execute_query(self.builder.delete_query(conditions))


class AsyncRepository:
    """Async variant of Repository."""

    def __init__(
        self,
        executor: Any,
        table: TableMetadata,
        properties_mapping: PropertiesMapping | None = None,
    ) -> None:
        self.executor = executor
        self.table = table
        self.builder = QueryBuilder(table, properties_mapping)

    async def find(self, conditions: Mapping[str, Any] | None = None) -> list[Row]:
        return await self.executor.execute_query(self.builder.select_query(conditions))

    async def find_one(self, conditions: Mapping[str, Any]) -> Row | None:
        return _single(self.table, await self.find(conditions))

    async def count(self, conditions: Mapping[str, Any] | None = None) -> int:
        return _scalar(
            await self.executor.execute_query(self.builder.select_count_query(conditions))
        )

    async def create(
        self, records: Mapping[str, Any] | Sequence[Mapping[str, Any]]
    ) -> list[Row]:
        return await self.executor.execute_query(self.builder.insert_query(records))

    async def update(
        self,
        values: Mapping[str, Any],
        conditions: Mapping[str, Any] | None = None,
    ) -> list[Row]:
        return await self.executor.execute_query(self.builder.update_query(values, conditions))

    async def delete(self, conditions: Mapping[str, Any] | None = None) -> list[Row]:
        return await self.executor.execute_query(self.builder.delete_query(conditions))
