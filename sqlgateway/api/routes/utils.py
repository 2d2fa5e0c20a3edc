import asyncio
import logging
from typing import Any

from fastapi import APIRouter

from sqlgateway.api.deps import ConfigDep, ManagerDep, SettingsDep
from sqlgateway.core.connection import server_time
from sqlgateway.core.gateway import make_json_safe, utc_now_iso
from sqlgateway.engines.sql.classifier import allowed_verbs
from sqlgateway.models import EntryPointEnum

logger = logging.getLogger(__name__)

router = APIRouter(tags=["utils"])

ENDPOINTS: dict[str, str] = {
    "health": "GET /api/health",
    "info": "GET /api/info",
    "testConnection": "GET /api/test-connection",
    "query": "POST /api/query",
    "execute": "POST /api/execute",
}


@router.get("/health")
async def health(settings: SettingsDep) -> dict[str, Any]:
    """
    Liveness probe. No database I/O.
    """
    return {
        "status": "OK",
        "message": f"{settings.PROJECT_NAME} running",
        "timestamp": utc_now_iso(),
        "version": settings.API_VERSION,
    }


@router.get("/info")
async def info(settings: SettingsDep, config: ConfigDep) -> dict[str, Any]:
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.API_VERSION,
        "productType": config.product_type.value,
        "endpoints": ENDPOINTS,
        "allowedVerbs": {
            ep.value: allowed_verbs(ep) for ep in EntryPointEnum
        },
    }


@router.get("/test-connection")
async def test_connection(config: ConfigDep, manager: ManagerDep) -> dict[str, Any]:
    """
    Open a fresh connection and read the server time.
    500 ConnectionError / QueryError envelope on failure.
    """
    logger.info("Testing connection to %s", config.product_type.value)
    now = await asyncio.to_thread(server_time, config, manager)
    logger.info("Connection to %s established", config.product_type.value)
    return {
        "status": "OK",
        "message": "Database connection established successfully",
        "serverTime": make_json_safe(now),
        "config": config.public_dict(),
    }
