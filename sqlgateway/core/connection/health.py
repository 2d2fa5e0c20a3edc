"""
Connection check for the target database (/api/test-connection).
"""

from typing import Any

from sqlgateway.core.errors import Phase, QueryExecutionError, translate_driver_error
from sqlgateway.models import ConnectionConfig, VerbCategory

from .driver import SERVER_TIME_SQL, driver_errors, execute
from .manager import ConnectionManager, get_connection_manager


def server_time(
    config: ConnectionConfig, manager: ConnectionManager | None = None
) -> Any:
    """
    Open a fresh connection, read the server's CURRENT_TIMESTAMP and release it.

    Raises DatabaseConnectionError if the connection cannot be opened and
    QueryExecutionError if the probe query fails.
    """
    manager = manager or get_connection_manager()
    sql = SERVER_TIME_SQL[config.product_type]
    with manager.connection(config, VerbCategory.READ) as handle:
        cur = None
        try:
            cur = execute(handle.conn, sql)
            row = cur.fetchone()
        except Exception as e:
            err = translate_driver_error(
                e,
                Phase.EXECUTE,
                driver_errors=driver_errors(config.product_type),
                sql=sql,
            )
            if isinstance(err, QueryExecutionError):
                err.message = "Error executing test query"
            raise err from e
        finally:
            if cur is not None:
                cur.close()
    return row[0] if row else None
