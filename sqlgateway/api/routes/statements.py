"""
Statement entry points: POST /query (read path) and POST /execute (write/DDL path).

Flow: parse body -> validate -> classify -> acquire -> run -> format -> release.
execute_statement is sync/blocking; run it in a worker thread so one slow
statement only suspends its own request.
"""

import asyncio
from typing import Any

from fastapi import APIRouter, Request

from sqlgateway.api.deps import ConfigDep, ManagerDep
from sqlgateway.core.gateway import format_outcome, parse_statement_request
from sqlgateway.engines.sql import execute_statement
from sqlgateway.models import EntryPointEnum

router = APIRouter(tags=["statements"])


async def _handle(
    request: Request,
    config: ConfigDep,
    manager: ManagerDep,
    entry_point: EntryPointEnum,
) -> dict[str, Any]:
    statement = await parse_statement_request(request)
    outcome = await asyncio.to_thread(
        execute_statement, config, statement, entry_point, manager=manager
    )
    return format_outcome(outcome)


@router.post("/query")
async def query(
    request: Request, config: ConfigDep, manager: ManagerDep
) -> dict[str, Any]:
    """
    Run a SELECT. Body: {sql, params?}.
    Returns {status: "OK", data, rowCount, executedAt}.
    """
    return await _handle(request, config, manager, EntryPointEnum.QUERY)


@router.post("/execute")
async def execute(
    request: Request, config: ConfigDep, manager: ManagerDep
) -> dict[str, Any]:
    """
    Run INSERT/UPDATE/DELETE/EXECUTE (committed) or CREATE/DROP/ALTER (auto-commit).
    Returns {status: "OK", message, affectedRows?, executedAt}.
    """
    return await _handle(request, config, manager, EntryPointEnum.EXECUTE)
