"""
Gateway request/response: parse_statement_request, format_outcome, format_error.

- parse_statement_request: read {sql, params?} from a JSON or form body and
  validate it (400 ValidationError on missing/empty sql or non-array params).
- format_outcome: total mapping of ExecutionOutcome to the success envelope.
- format_error: GatewayError to the error envelope.
Both envelopes are always JSON-serializable.
"""

import json
import uuid
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any

from starlette.requests import Request

from sqlgateway.core.errors import GatewayError, InvalidStatementError
from sqlgateway.models import (
    Affected,
    ExecutionOutcome,
    Rows,
    StatementRequest,
)

STATUS_OK = "OK"
STATUS_ERROR = "ERROR"
COMMAND_OK_MESSAGE = "Command executed successfully"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


async def _read_body(request: Request) -> dict[str, Any]:
    """Read JSON or form body; return {} on no body or unsupported type."""
    ct = (request.headers.get("content-type") or "").split(";")[0].strip().lower()
    if ct == "application/json":
        try:
            raw = await request.json()
        except Exception:
            return {}
        return raw if isinstance(raw, dict) else {}
    if ct in ("application/x-www-form-urlencoded", "multipart/form-data"):
        try:
            form = await request.form()
        except Exception:
            return {}
        out: dict[str, Any] = dict(form)
        # params[]=1&params[]=2 or repeated params=...
        bracketed = form.getlist("params[]")
        repeated = form.getlist("params")
        if bracketed:
            out["params"] = list(bracketed)
        elif len(repeated) > 1:
            out["params"] = list(repeated)
        return out
    return {}


def _coerce_params(raw: Any) -> list[Any]:
    if raw is None:
        return []
    if isinstance(raw, str):
        # form bodies carry params as JSON text
        try:
            raw = json.loads(raw) if raw.strip() else []
        except ValueError:
            raise InvalidStatementError("params must be a JSON array") from None
    if isinstance(raw, tuple):
        raw = list(raw)
    if not isinstance(raw, list):
        raise InvalidStatementError("params must be an array")
    return raw


def build_statement_request(body: dict[str, Any]) -> StatementRequest:
    """Validate a decoded body into a StatementRequest."""
    sql = body.get("sql")
    if not isinstance(sql, str) or not sql.strip():
        raise InvalidStatementError()
    return StatementRequest(sql=sql, params=_coerce_params(body.get("params")))


async def parse_statement_request(request: Request) -> StatementRequest:
    return build_statement_request(await _read_body(request))


def make_json_safe(obj: Any) -> Any:
    """Recursively convert non-JSON-serializable types to safe primitives.

    Handles: datetime, date, time, timedelta, Decimal, UUID, bytes, sets.
    Database rows routinely carry these (TIMESTAMP, NUMERIC, BLOB columns).
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, time):
        return obj.isoformat()
    if isinstance(obj, timedelta):
        return obj.total_seconds()
    if isinstance(obj, Decimal):
        # Preserve integer-valued decimals as int, otherwise float
        if not obj.is_finite():
            return str(obj)
        if obj == obj.to_integral_value():
            return int(obj)
        return float(obj)
    if isinstance(obj, uuid.UUID):
        return str(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return bytes(obj).decode("utf-8", errors="replace")
    if isinstance(obj, dict):
        return {str(k): make_json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [make_json_safe(item) for item in obj]
    if isinstance(obj, set):
        return [make_json_safe(item) for item in sorted(obj, key=str)]
    # Fallback: use str() for unknown types
    return str(obj)


def format_outcome(outcome: ExecutionOutcome) -> dict[str, Any]:
    """
    Success envelope for an execution outcome:

    - Rows         -> {status, data, rowCount, executedAt}
    - Affected     -> {status, message, affectedRows, executedAt}
    - Acknowledged -> {status, message, executedAt}
    """
    out: dict[str, Any] = {"status": STATUS_OK}
    if isinstance(outcome, Rows):
        out["data"] = make_json_safe(outcome.rows)
        out["rowCount"] = outcome.row_count
    elif isinstance(outcome, Affected):
        out["message"] = COMMAND_OK_MESSAGE
        out["affectedRows"] = outcome.rows_affected
    else:
        out["message"] = COMMAND_OK_MESSAGE
    out["executedAt"] = utc_now_iso()
    return out


def format_error(err: GatewayError) -> dict[str, Any]:
    """Error envelope: {status, kind, message, error?, context?}."""
    out: dict[str, Any] = {
        "status": STATUS_ERROR,
        "kind": err.kind.value,
        "message": err.message,
    }
    if err.error is not None:
        out["error"] = err.error
    if err.context:
        out["context"] = make_json_safe(err.context)
    return out
