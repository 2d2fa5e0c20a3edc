from fastapi import APIRouter

from sqlgateway.api.routes import statements, utils

api_router = APIRouter()
api_router.include_router(utils.router)
api_router.include_router(statements.router)
