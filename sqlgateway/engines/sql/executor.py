"""
Run one classified statement on one request-scoped connection.

Commit policy per category:
- READ: execute and fetch all rows; no commit.
- DDL: execute; auto-committing by definition, commit is never called.
- WRITE: execute, then commit; only a successful commit yields Affected.

Uses core.connection (ConnectionManager, execute, cursor_to_dicts).
"""

import logging
from typing import Any

from sqlgateway.core.connection import (
    ConnectionHandle,
    ConnectionManager,
    affected_rows,
    cursor_to_dicts,
    driver_errors,
    execute,
    get_connection_manager,
)
from sqlgateway.core.errors import (
    InternalGatewayError,
    Phase,
    QueryExecutionError,
    StatementNotAllowedError,
    translate_driver_error,
)
from sqlgateway.engines.sql.classifier import classify
from sqlgateway.models import (
    Acknowledged,
    Affected,
    ConnectionConfig,
    EntryPointEnum,
    ExecutionOutcome,
    Rows,
    StatementRequest,
    VerbCategory,
)

_log = logging.getLogger(__name__)

REJECTED_MESSAGES: dict[EntryPointEnum, str] = {
    EntryPointEnum.QUERY: (
        "Only SELECT queries are allowed on this endpoint. "
        "Use /api/execute for other operations."
    ),
    EntryPointEnum.EXECUTE: (
        "This endpoint only accepts INSERT, UPDATE, DELETE, CREATE, DROP, ALTER "
        "or EXECUTE. Use /api/query for SELECT."
    ),
}

_EXECUTE_FAILED: dict[VerbCategory, str] = {
    VerbCategory.READ: "Error executing query",
    VerbCategory.WRITE: "Error executing command",
    VerbCategory.DDL: "Error executing command",
}


def _preview(sql: str) -> str:
    return sql if len(sql) <= 100 else sql[:100] + "..."


def _close_cursor(cur: Any) -> None:
    try:
        cur.close()
    except Exception:
        _log.debug("Closing cursor failed", exc_info=True)


def run_statement(
    handle: ConnectionHandle, request: StatementRequest, category: VerbCategory
) -> ExecutionOutcome:
    """Execute *request* on *handle* and apply the commit policy for *category*."""
    if category == VerbCategory.REJECTED:
        raise InternalGatewayError(
            error="Rejected statement reached the executor",
            context={"category": category.value},
        )
    errors = driver_errors(handle.config.product_type)
    conn = handle.conn

    cur = None
    rows: list[dict[str, Any]] = []
    count = 0
    try:
        cur = execute(conn, request.sql, request.params)
        if category == VerbCategory.READ:
            rows = cursor_to_dicts(cur)
        elif category == VerbCategory.WRITE:
            count = affected_rows(cur)
    except Exception as e:
        err = translate_driver_error(
            e, Phase.EXECUTE, driver_errors=errors, sql=request.sql
        )
        if isinstance(err, QueryExecutionError):
            err.message = _EXECUTE_FAILED[category]
        _log.error("Error executing statement: %s", err.error)
        raise err from e
    finally:
        if cur is not None:
            _close_cursor(cur)

    if category == VerbCategory.READ:
        _log.info("Query executed successfully. %d rows returned.", len(rows))
        return Rows(rows=rows)

    if category == VerbCategory.DDL:
        _log.info("DDL statement executed successfully (auto-commit)")
        return Acknowledged()

    try:
        conn.commit()
    except Exception as e:
        err = translate_driver_error(e, Phase.COMMIT, driver_errors=errors)
        _log.error("Error committing transaction: %s", err.error)
        raise err from e
    _log.info("DML statement executed and committed successfully")
    return Affected(rows_affected=count)


def execute_statement(
    config: ConnectionConfig,
    request: StatementRequest,
    entry_point: EntryPointEnum,
    *,
    manager: ConnectionManager | None = None,
) -> ExecutionOutcome:
    """
    Full pipeline for one request: classify, acquire, run, release.

    Blocking; the HTTP layer runs it in a worker thread. Rejected statements
    raise StatementNotAllowedError before any connection is opened. The
    connection is released exactly once on every path after acquisition.
    """
    category = classify(request.sql, entry_point)
    if category == VerbCategory.REJECTED:
        raise StatementNotAllowedError(REJECTED_MESSAGES[entry_point])

    manager = manager or get_connection_manager()
    _log.info("Executing %s statement: %s", category.value, _preview(request.sql))
    with manager.connection(config, category) as handle:
        return run_statement(handle, request, category)
