"""Query compilation for a single table.

QueryBuilder assembles complete SELECT / INSERT / UPDATE / DELETE statements
from conditions mappings. Mutating statements end with ``RETURNING *`` so
callers get the affected rows back; reads never do.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any

from nordic.core.conditions import SET_OPTIONS, WHERE_OPTIONS, ConditionCompiler
from nordic.core.exceptions import EmptyInsertError
from nordic.core.metadata import TableMetadata
from nordic.core.query import ParameterizedQuery, PropertiesMapping

Record = Mapping[str, Any]


def unified_columns(records: Sequence[Record]) -> list[str]:
    """Union of keys across *records*, in first-seen order."""
    columns: dict[str, None] = {}
    for record in records:
        columns.update(dict.fromkeys(record))
    return list(columns)


class QueryBuilder:
    """Builds parameterized queries against one table.

    Args:
        table: Schema and name of the target table.
        properties_mapping: Optional column -> expression function mapping
            applied to INSERT values and UPDATE ``SET`` expressions.
    """

    def __init__(
        self,
        table: TableMetadata,
        properties_mapping: PropertiesMapping | None = None,
    ) -> None:
        self._table = table
        self._conditions = ConditionCompiler(properties_mapping)

    @property
    def table(self) -> TableMetadata:
        return self._table

    def select_query(self, conditions: Mapping[str, Any] | None = None) -> ParameterizedQuery:
        """``SELECT * FROM schema.table AS table [WHERE ...]``."""
        return self._with_where(
            f"SELECT * FROM {self._table.from_clause}", conditions, returning=False
        )

    def select_count_query(
        self, conditions: Mapping[str, Any] | None = None
    ) -> ParameterizedQuery:
        """``SELECT COUNT(*) as count FROM schema.table AS table [WHERE ...]``."""
        return self._with_where(
            f"SELECT COUNT(*) as count FROM {self._table.from_clause}",
            conditions,
            returning=False,
        )

    def insert_query(self, records: Record | Sequence[Record]) -> ParameterizedQuery:
        """Multi-row ``INSERT ... RETURNING *``.

        Columns are the union of keys across all records; a record missing a
        column binds ``None``. Placeholders are laid out row-major, one
        contiguous block per record.

        Raises:
            EmptyInsertError: If *records* is an empty sequence.
        """
        items: list[Record] = [records] if isinstance(records, Mapping) else list(records)
        if not items:
            raise EmptyInsertError(self._table.qualified_name)

        columns = unified_columns(items)
        column_count = len(columns)
        groups: list[str] = []
        values: list[Any] = []
        for i, record in enumerate(items):
            expressions = [
                self._conditions.expression(column, record, j + 1 + column_count * i)
                for j, column in enumerate(columns)
            ]
            groups.append(f"({', '.join(expressions)})")
            values.extend(record.get(column) for column in columns)

        text = (
            f"INSERT INTO {self._table.qualified_name} ({', '.join(columns)}) "
            f"VALUES {', '.join(groups)} RETURNING *"
        )
        return ParameterizedQuery(text, tuple(values))

    def update_query(
        self,
        values: Mapping[str, Any],
        conditions: Mapping[str, Any] | None = None,
    ) -> ParameterizedQuery:
        """``UPDATE schema.table SET ... [WHERE ...] RETURNING *``.

        WHERE placeholders continue numbering after the SET list. As with
        :meth:`delete_query`, conditions binding no values update every row.
        """
        update_expression = self._conditions.compile(values, SET_OPTIONS)
        where = self._conditions.compile(
            conditions,
            replace(WHERE_OPTIONS, index_offset=len(update_expression.values)),
        )
        text = self._append_where(
            f"UPDATE {self._table.qualified_name} SET {update_expression.text}", where
        )
        return ParameterizedQuery(
            f"{text} RETURNING *", update_expression.values + where.values
        )

    def delete_query(self, conditions: Mapping[str, Any] | None = None) -> ParameterizedQuery:
        """``DELETE FROM schema.table [WHERE ...] RETURNING *``.

        Conditions that bind no values, such as ``{"id": []}``, emit no WHERE
        and delete every row.
        """
        return self._with_where(
            f"DELETE FROM {self._table.qualified_name}", conditions, returning=True
        )

    def _with_where(
        self,
        text: str,
        conditions: Mapping[str, Any] | None,
        *,
        returning: bool,
    ) -> ParameterizedQuery:
        where = self._conditions.compile(conditions, WHERE_OPTIONS)
        text = self._append_where(text, where)
        if returning:
            text = f"{text} RETURNING *"
        return ParameterizedQuery(text, where.values)

    @staticmethod
    def _append_where(text: str, where: ParameterizedQuery) -> str:
        # An empty IN list carries no values and no WHERE is emitted for it
        if not where.values:
            return text
        return f"{text} WHERE {where.text}"
