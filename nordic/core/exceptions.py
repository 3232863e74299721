"""Nordic exception hierarchy.

Every error raised by the package derives from ``NordicError``. Driver
exceptions are wrapped, with the original chained as ``__cause__``.
"""

from __future__ import annotations


class NordicError(Exception):
    """Base exception for all Nordic errors."""


# --- Query building ---


class QueryBuildError(NordicError):
    """Base for query compilation errors."""


class EmptyInsertError(QueryBuildError):
    """Raised when an insert query is requested for zero records."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Trying to insert an empty array into '{table}'")


# --- Execution ---


class ExecutionError(NordicError):
    """Base for query execution errors."""


class QueryExecutionError(ExecutionError):
    """Raised when the database driver fails to execute a query."""

    def __init__(self, text: str, detail: str) -> None:
        self.text = text
        super().__init__(f"Query execution failed for '{text}': {detail}")


class ParameterBindingError(ExecutionError):
    """Raised when a named template references a value that was not supplied."""

    def __init__(self, name: str, template: str) -> None:
        self.name = name
        self.template = template
        super().__init__(f"No value supplied for parameter ':{name}' in: {template}")


class MultipleRowsError(ExecutionError):
    """Raised when ``find_one`` encounters more than one row."""

    def __init__(self, table: str, row_count: int) -> None:
        self.table = table
        self.row_count = row_count
        super().__init__(
            f"find_one on '{table}' returned {row_count} rows (expected 0 or 1)"
        )


# --- Metadata ---


class MetadataError(NordicError):
    """Raised when database metadata cannot be loaded."""


class TableNotFoundError(MetadataError):
    """Raised when a table key is not present in the loaded metadata."""

    def __init__(self, table_key: str) -> None:
        self.table_key = table_key
        super().__init__(f"Table not found in metadata: '{table_key}'")


# --- Transaction ---


class TransactionError(NordicError):
    """Base for transaction errors."""


class TransactionStateError(TransactionError):
    """Raised on invalid transaction state transitions."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} transaction in state '{current_state}'")


# --- Adapter ---


class AdapterError(NordicError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
