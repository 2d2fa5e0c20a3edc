"""
Per-request connection lifecycle.

Every request opens its own connection and closes it before the response is
sent. Nothing is pooled, cached or shared between requests; concurrency comes
from independent connections only.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlgateway.core.errors import Phase, translate_driver_error
from sqlgateway.models import ConnectionConfig, VerbCategory

from .driver import connect, driver_errors

_log = logging.getLogger(__name__)


class ConnectionHandle:
    """A connection owned by exactly one in-flight request."""

    __slots__ = ("conn", "config", "category", "_released")

    def __init__(self, conn: Any, config: ConnectionConfig, category: VerbCategory) -> None:
        self.conn = conn
        self.config = config
        self.category = category
        self._released = False

    @property
    def released(self) -> bool:
        return self._released


class ConnectionManager:
    """Acquire one connection per request; release it exactly once."""

    def acquire(self, config: ConnectionConfig, category: VerbCategory) -> ConnectionHandle:
        """
        Open a fresh connection for *category*.

        DDL sessions are opened in auto-commit mode, so no explicit commit is
        ever needed for them. Any failure raises
        DatabaseConnectionError before a query is attempted.
        """
        try:
            conn = connect(config, autocommit=category == VerbCategory.DDL)
        except Exception as e:
            _log.error("Error connecting to %s: %s", config.product_type.value, e)
            raise translate_driver_error(
                e, Phase.CONNECT, driver_errors=driver_errors(config.product_type)
            ) from e
        return ConnectionHandle(conn, config, category)

    def release(self, handle: ConnectionHandle, *, failed: bool = False) -> None:
        """
        Close the handle. Rolls back first on a failed path so the driver's
        detach does not persist half-done work. Second calls are no-ops;
        errors while rolling back/closing are logged, never raised.
        """
        if handle.released:
            return
        handle._released = True
        _log.debug(
            "Releasing %s connection to %s (failed=%s)",
            handle.category.value,
            handle.config.product_type.value,
            failed,
        )
        if failed:
            try:
                handle.conn.rollback()
            except Exception:
                _log.warning("Rollback before release failed", exc_info=True)
        try:
            handle.conn.close()
        except Exception:
            _log.warning("Closing connection failed", exc_info=True)

    @contextmanager
    def connection(
        self, config: ConnectionConfig, category: VerbCategory
    ) -> Iterator[ConnectionHandle]:
        """Scoped acquisition: release on every exit, including exceptions."""
        handle = self.acquire(config, category)
        failed = True
        try:
            yield handle
            failed = False
        finally:
            self.release(handle, failed=failed)


_connection_manager = ConnectionManager()


def get_connection_manager() -> ConnectionManager:
    """Return the module-level ConnectionManager (stateless, safe to share)."""
    return _connection_manager
