"""Driver adapter protocols.

An adapter opens and closes driver connections and runs a compiled
``ParameterizedQuery`` on one, rewriting its ``$n`` placeholders into the
binding style the driver understands. Pooling lives in the connection
managers, not here.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from nordic.core.connection import ConnectionConfig
from nordic.core.enums import ParamStyle
from nordic.core.query import ParameterizedQuery


@runtime_checkable
class SyncAdapter(Protocol):
    """Blocking driver adapter."""

    placeholder_style: ParamStyle

    def connect(self, config: ConnectionConfig) -> Any:
        """Open a driver connection."""
        ...

    def disconnect(self, connection: Any) -> None: ...

    def run(self, connection: Any, query: ParameterizedQuery) -> Any:
        """Bind and execute *query*, returning the driver cursor."""
        ...


@runtime_checkable
class AsyncAdapter(Protocol):
    """Coroutine-based driver adapter."""

    placeholder_style: ParamStyle

    async def connect(self, config: ConnectionConfig) -> Any:
        """Open a driver connection."""
        ...

    async def disconnect(self, connection: Any) -> None: ...

    async def run(self, connection: Any, query: ParameterizedQuery) -> Any:
        """Bind and execute *query*, returning the driver cursor."""
        ...
