"""
Gateway error taxonomy.

Every failure that reaches the HTTP boundary is one of these kinds. Driver
exceptions are mapped onto the taxonomy by the pipeline phase they happened
in (connect / execute / commit); the driver's own message and codes are kept
as auxiliary context.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "ValidationError"
    PERMISSION = "PermissionError"
    CONNECTION = "ConnectionError"
    QUERY = "QueryError"
    COMMIT = "CommitError"
    INTERNAL = "InternalError"


class Phase(str, Enum):
    CONNECT = "connect"
    EXECUTE = "execute"
    COMMIT = "commit"


class GatewayError(Exception):
    """Base class: carries kind, HTTP status, driver message and context."""

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        error: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.error = error
        self.context = context or {}
        super().__init__(self.message)


class InvalidStatementError(GatewayError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    default_message = "SQL query is required"


class StatementNotAllowedError(GatewayError):
    kind = ErrorKind.PERMISSION
    status_code = 403
    default_message = "Statement is not allowed on this endpoint"


class DatabaseConnectionError(GatewayError):
    kind = ErrorKind.CONNECTION
    default_message = "Error connecting to the database"


class QueryExecutionError(GatewayError):
    kind = ErrorKind.QUERY
    default_message = "Error executing statement"


class CommitFailedError(GatewayError):
    kind = ErrorKind.COMMIT
    default_message = "Error committing transaction"


class InternalGatewayError(GatewayError):
    kind = ErrorKind.INTERNAL


_PHASE_ERRORS: dict[Phase, type[GatewayError]] = {
    Phase.CONNECT: DatabaseConnectionError,
    Phase.EXECUTE: QueryExecutionError,
    Phase.COMMIT: CommitFailedError,
}


def driver_error_context(exc: BaseException) -> dict[str, Any]:
    """Driver class plus whatever SQLSTATE / vendor code the exception exposes."""
    ctx: dict[str, Any] = {"driver_error": type(exc).__name__}
    # psycopg: sqlstate; firebird-driver: sqlstate + sqlcode + gds_codes;
    # pymysql: args[0] is the MySQL errno; trino: error_code / error_name.
    sqlstate = getattr(exc, "sqlstate", None)
    if sqlstate:
        ctx["sqlstate"] = sqlstate
    for attr in ("sqlcode", "error_code", "error_name"):
        val = getattr(exc, attr, None)
        if val is not None:
            ctx[attr] = val
    if "error_code" not in ctx and type(exc).__module__.startswith("pymysql"):
        if exc.args and isinstance(exc.args[0], int):
            ctx["error_code"] = exc.args[0]
    return ctx


def translate_driver_error(
    exc: BaseException,
    phase: Phase,
    *,
    driver_errors: tuple[type[BaseException], ...],
    sql: str | None = None,
) -> GatewayError:
    """
    Map an exception raised inside the pipeline onto the taxonomy.

    Any failure while connecting is a ConnectionError (unreachable host, bad
    credentials, DNS, socket timeouts are not all driver exceptions). During
    execute/commit only the active driver's Error hierarchy maps to
    Query/CommitError; anything else is a bug and becomes InternalError.
    """
    if isinstance(exc, GatewayError):
        return exc
    message = str(exc) or type(exc).__name__
    context = driver_error_context(exc)
    if sql is not None and phase is Phase.EXECUTE:
        context["sql"] = sql
    if phase is Phase.CONNECT or isinstance(exc, driver_errors):
        return _PHASE_ERRORS[phase](error=message, context=context)
    return InternalGatewayError(error=message, context=context)
