"""Nordic - parameterized SQL generation for positional-placeholder drivers."""

from __future__ import annotations

from nordic.core.builder import QueryBuilder
from nordic.core.conditions import (
    ConditionCompiler,
    ConditionOptions,
    Scalar,
    ValueList,
    compile_conditions,
)
from nordic.core.connection import (
    AsyncConnectionManager,
    ConnectionConfig,
    ConnectionManager,
)
from nordic.core.engine import AsyncEngine, Engine
from nordic.core.enums import DatabaseBackend, ParamStyle, ValueExpressionMode
from nordic.core.exceptions import (
    AdapterError,
    ConnectionError,  # noqa: A004
    EmptyInsertError,
    ExecutionError,
    MetadataError,
    MultipleRowsError,
    NordicError,
    ParameterBindingError,
    PoolError,
    QueryBuildError,
    QueryExecutionError,
    TableNotFoundError,
    TransactionError,
    TransactionStateError,
)
from nordic.core.metadata import DatabaseMetadata, TableMetadata
from nordic.core.params import normalize_placeholders, rewrite_named_params
from nordic.core.query import ParameterizedQuery, PropertiesMapping
from nordic.core.transaction import AsyncTransactionManager, TransactionManager
from nordic.core.transform import to_camel_case, transform_row_keys
from nordic.repository.base import AsyncRepository, Repository

__all__ = [
    # Compiler
    "ParameterizedQuery",
    "PropertiesMapping",
    "ConditionCompiler",
    "ConditionOptions",
    "Scalar",
    "ValueList",
    "compile_conditions",
    "QueryBuilder",
    "rewrite_named_params",
    "normalize_placeholders",
    # Metadata
    "TableMetadata",
    "DatabaseMetadata",
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    "AsyncConnectionManager",
    # Engine
    "Engine",
    "AsyncEngine",
    # Transaction
    "TransactionManager",
    "AsyncTransactionManager",
    # Repository
    "Repository",
    "AsyncRepository",
    # Transforms
    "to_camel_case",
    "transform_row_keys",
    # Enums
    "DatabaseBackend",
    "ParamStyle",
    "ValueExpressionMode",
    # Exceptions
    "NordicError",
    "QueryBuildError",
    "EmptyInsertError",
    "ExecutionError",
    "QueryExecutionError",
    "ParameterBindingError",
    "MultipleRowsError",
    "MetadataError",
    "TableNotFoundError",
    "TransactionError",
    "TransactionStateError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
