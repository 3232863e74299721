"""Enumerations shared across the compiler and the adapters."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class ValueExpressionMode(Enum):
    """How a condition placeholder is rendered into clause text."""

    PLACEHOLDER = "placeholder"
    MAPPED = "mapped"


class ParamStyle(Enum):
    """Placeholder style a driver expects in the SQL it executes."""

    NUMERIC = "numeric"  # $1, $2
    QMARK = "qmark"  # ?1, ?2
    FORMAT = "format"  # %s
