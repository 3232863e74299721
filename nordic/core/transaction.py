"""Transaction management.

Provides context managers for executing multiple statements atomically.
Auto-commits on success, auto-rolls-back on exception.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from nordic.core.exceptions import TransactionStateError
from nordic.core.executor import execute_on_connection, execute_on_connection_async
from nordic.core.params import rewrite_named_params
from nordic.core.query import ParameterizedQuery
from nordic.core.transform import KeyTransform

logger = logging.getLogger(__name__)


class _TxState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


def _check_active(state: _TxState) -> None:
    if state is not _TxState.ACTIVE:
        raise TransactionStateError(state.value, "execute")


class TransactionManager:
    """Synchronous transaction context manager."""

    def __init__(
        self,
        connection_manager: Any,
        key_transform: KeyTransform | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        self._adapter = connection_manager.adapter
        self._key_transform = key_transform
        self._connection: Any = None
        self._state = _TxState.IDLE

    def __enter__(self) -> TransactionManager:
        self._connection = self._connection_manager.acquire()
        self._state = _TxState.ACTIVE
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if self._state == _TxState.ACTIVE:
                if exc_type is not None:
                    logger.debug("Rolling back transaction after %s", exc_type.__name__)
                    self._connection.rollback()
                    self._state = _TxState.ROLLED_BACK
                else:
                    self._connection.commit()
                    self._state = _TxState.COMMITTED
        finally:
            self._connection_manager.release(self._connection)

    def execute_query(self, query: ParameterizedQuery) -> list[dict[str, Any]]:
        """Execute a compiled query within this transaction."""
        _check_active(self._state)
        return execute_on_connection(
            self._adapter, self._connection, query, self._key_transform
        )

    def raw_query(
        self,
        template: str,
        named_values: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Rewrite a ``:name`` template and execute it within this transaction."""
        return self.execute_query(rewrite_named_params(template, named_values))

    def commit(self) -> None:
        """Explicitly commit the transaction."""
        if self._state in (_TxState.IDLE, _TxState.ROLLED_BACK, _TxState.COMMITTED):
            raise TransactionStateError(self._state.value, "commit")
        self._connection.commit()
        self._state = _TxState.COMMITTED

    def rollback(self) -> None:
        """Explicitly rollback the transaction."""
        if self._state in (_TxState.IDLE, _TxState.COMMITTED):
            raise TransactionStateError(self._state.value, "rollback")
        self._connection.rollback()
        self._state = _TxState.ROLLED_BACK


class AsyncTransactionManager:
    """Asynchronous transaction context manager.

    The connection is acquired in ``__aenter__``, allowing usage as
    ``async with engine.transaction() as tx:``.
    """

    def __init__(
        self,
        connection_manager: Any,
        key_transform: KeyTransform | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        self._adapter = connection_manager.adapter
        self._key_transform = key_transform
        self._connection: Any = None
        self._state = _TxState.IDLE

    async def __aenter__(self) -> AsyncTransactionManager:
        self._connection = await self._connection_manager.acquire()
        self._state = _TxState.ACTIVE
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if self._state == _TxState.ACTIVE:
                if exc_type is not None:
                    logger.debug("Rolling back transaction after %s", exc_type.__name__)
                    await self._connection.rollback()
                    self._state = _TxState.ROLLED_BACK
                else:
                    await self._connection.commit()
                    self._state = _TxState.COMMITTED
        finally:
            await self._connection_manager.release(self._connection)

    async def execute_query(self, query: ParameterizedQuery) -> list[dict[str, Any]]:
        """Execute a compiled query within this async transaction."""
        _check_active(self._state)
        return await execute_on_connection_async(
            self._adapter, self._connection, query, self._key_transform
        )

    async def raw_query(
        self,
        template: str,
        named_values: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Rewrite a ``:name`` template and execute it within this transaction."""
        return await self.execute_query(rewrite_named_params(template, named_values))

    async def commit(self) -> None:
        """Explicitly commit the async transaction."""
        if self._state in (_TxState.IDLE, _TxState.ROLLED_BACK, _TxState.COMMITTED):
            raise TransactionStateError(self._state.value, "commit")
        await self._connection.commit()
        self._state = _TxState.COMMITTED

    async def rollback(self) -> None:
        """Explicitly rollback the async transaction."""
        if self._state in (_TxState.IDLE, _TxState.COMMITTED):
            raise TransactionStateError(self._state.value, "rollback")
        await self._connection.rollback()
        self._state = _TxState.ROLLED_BACK
