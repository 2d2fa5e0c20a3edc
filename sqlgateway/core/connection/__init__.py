"""
Per-request DB connections for the target database.

No pooling: every request opens its own connection through connect() and the
ConnectionManager closes it before the response is sent.
"""

from .driver import affected_rows, connect, cursor_to_dicts, driver_errors, execute
from .health import server_time
from .manager import ConnectionHandle, ConnectionManager, get_connection_manager

__all__ = [
    "connect",
    "execute",
    "cursor_to_dicts",
    "affected_rows",
    "driver_errors",
    "server_time",
    "ConnectionHandle",
    "ConnectionManager",
    "get_connection_manager",
]
