"""Connection configuration and pooling.

ConnectionConfig picks the driver adapter and carries its connect arguments.
The managers keep at most ``pool_size`` connections open, hand out idle ones
first, and close whatever is idle on shutdown. SQLite ``:memory:`` databases
live and die with their connection, so use ``pool_size=1`` for them.
"""

from __future__ import annotations

import importlib
import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any

from pydantic import BaseModel, Field

from nordic.core.enums import DatabaseBackend
from nordic.core.exceptions import AdapterError, PoolError

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections.

    ``extra`` is passed as keyword arguments to the driver's connect call.
    """

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    pool_size: int = Field(default=5, ge=1)
    extra: dict[str, Any] = {}


# (backend, async?) -> "module:Class"
_ADAPTERS: dict[tuple[DatabaseBackend, bool], str] = {
    (DatabaseBackend.SQLITE, False): "nordic.adapters.sqlite:SqliteSyncAdapter",
    (DatabaseBackend.SQLITE, True): "nordic.adapters.sqlite:SqliteAsyncAdapter",
    (DatabaseBackend.POSTGRESQL, False): "nordic.adapters.postgresql:PostgresqlSyncAdapter",
    (DatabaseBackend.POSTGRESQL, True): "nordic.adapters.postgresql:PostgresqlAsyncAdapter",
}


def load_adapter(driver: str, is_async: bool = False) -> Any:
    """Instantiate the adapter registered for *driver*.

    Raises:
        AdapterError: If the driver is unknown or its module cannot be imported.
    """
    try:
        backend = DatabaseBackend(driver.lower())
    except ValueError:
        raise AdapterError(f"Unsupported database driver: {driver}") from None

    module_path, _, class_name = _ADAPTERS[(backend, is_async)].partition(":")
    try:
        return getattr(importlib.import_module(module_path), class_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Cannot load adapter for '{driver}': {e}") from e


class ConnectionManager:
    """Bounded pool of blocking connections."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = load_adapter(config.driver)
        self._idle: list[Any] = []
        self._open = 0

    @property
    def adapter(self) -> Any:
        return self._adapter

    def acquire(self) -> Any:
        """Reuse an idle connection or open a new one; pair with :meth:`release`.

        Raises:
            PoolError: If ``pool_size`` connections are already checked out.
        """
        if self._idle:
            return self._idle.pop()
        if self._open >= self.config.pool_size:
            raise PoolError(f"All {self.config.pool_size} connection(s) are in use")
        connection = self._adapter.connect(self.config)
        self._open += 1
        logger.debug(
            "Opened %s connection %d/%d", self.config.driver, self._open, self.config.pool_size
        )
        return connection

    def release(self, connection: Any) -> None:
        self._idle.append(connection)

    @contextmanager
    def get_connection(self):  # type: ignore[no-untyped-def]
        connection = self.acquire()
        try:
            yield connection
        finally:
            self.release(connection)

    def close(self) -> None:
        """Close every idle connection."""
        while self._idle:
            self._adapter.disconnect(self._idle.pop())
            self._open -= 1


class AsyncConnectionManager:
    """Bounded pool of async connections."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = load_adapter(config.driver, is_async=True)
        self._idle: list[Any] = []
        self._open = 0

    @property
    def adapter(self) -> Any:
        return self._adapter

    async def acquire(self) -> Any:
        if self._idle:
            return self._idle.pop()
        if self._open >= self.config.pool_size:
            raise PoolError(f"All {self.config.pool_size} connection(s) are in use")
        connection = await self._adapter.connect(self.config)
        self._open += 1
        logger.debug(
            "Opened %s connection %d/%d", self.config.driver, self._open, self.config.pool_size
        )
        return connection

    async def release(self, connection: Any) -> None:
        self._idle.append(connection)

    @asynccontextmanager
    async def get_connection(self):  # type: ignore[no-untyped-def]
        connection = await self.acquire()
        try:
            yield connection
        finally:
            await self.release(connection)

    async def close(self) -> None:
        while self._idle:
            await self._adapter.disconnect(self._idle.pop())
            self._open -= 1
