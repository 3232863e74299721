"""Table metadata.

TableMetadata identifies a table by schema and name. DatabaseMetadata is a
read-only registry of tables keyed by an application-chosen name, loaded from
a mapping or a JSON file::

    {
        "articles": {"schema": "public", "name": "articles"},
        "authors": {"schema": "blog", "name": "author"}
    }
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from nordic.core.exceptions import MetadataError, TableNotFoundError


@dataclass(frozen=True)
class TableMetadata:
    """Schema-qualified table identity. The table alias equals its name."""

    schema: str
    name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}"

    @property
    def from_clause(self) -> str:
        return f"{self.qualified_name} AS {self.name}"


_TABLES_ADAPTER = TypeAdapter(dict[str, TableMetadata])


class DatabaseMetadata(Mapping[str, TableMetadata]):
    """Immutable registry of table metadata keyed by table key.

    Raises:
        MetadataError: If the source does not describe ``{key: {schema, name}}``.
    """

    def __init__(self, tables: Mapping[str, TableMetadata]) -> None:
        self._tables = dict(tables)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DatabaseMetadata:
        """Validate a raw ``{key: {"schema": ..., "name": ...}}`` mapping."""
        try:
            tables = _TABLES_ADAPTER.validate_python(dict(data))
        except ValidationError as e:
            raise MetadataError(f"Invalid database metadata: {e}") from e
        return cls(tables)

    @classmethod
    def from_file(cls, path: Path | str) -> DatabaseMetadata:
        """Load metadata from a JSON file."""
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise MetadataError(f"Cannot read metadata file '{path}': {e}") from e
        try:
            tables = _TABLES_ADAPTER.validate_json(content)
        except ValidationError as e:
            raise MetadataError(f"Invalid database metadata in '{path}': {e}") from e
        return cls(tables)

    def table(self, table_key: str) -> TableMetadata:
        """Look up a table by key.

        Raises:
            TableNotFoundError: If no table is registered under *table_key*.
        """
        try:
            return self._tables[table_key]
        except KeyError:
            raise TableNotFoundError(table_key) from None

    def __getitem__(self, table_key: str) -> TableMetadata:
        return self.table(table_key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)
