import logging
from collections.abc import Awaitable, Callable

import sentry_sdk
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from sqlgateway.api.main import api_router
from sqlgateway.api.routes.utils import ENDPOINTS
from sqlgateway.core.config import Settings, load_settings
from sqlgateway.core.errors import GatewayError, InternalGatewayError
from sqlgateway.core.gateway import format_error

_logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the gateway. Configuration is read once here and stored on
    app.state; routes receive it through dependencies.
    """
    settings = settings or load_settings()
    configure_logging(settings)

    if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
        sentry_sdk.init(dsn=str(settings.SENTRY_DSN), enable_tracing=True)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.API_VERSION,
        openapi_url=f"{API_PREFIX}/openapi.json",
        docs_url=f"{API_PREFIX}/docs",
        redoc_url=f"{API_PREFIX}/redoc",
        generate_unique_id_function=custom_generate_unique_id,
    )
    app.state.settings = settings
    app.state.connection_config = settings.connection_config()

    # -----------------------------------------------------------------------
    # Exception handlers: every failure leaves as a {status: "ERROR"} envelope
    # -----------------------------------------------------------------------

    @app.exception_handler(GatewayError)
    async def gateway_exception_handler(
        request: Request, exc: GatewayError
    ) -> JSONResponse:
        if exc.status_code >= 500:
            _logger.error(
                "%s on %s %s: %s",
                exc.kind.value,
                request.method,
                request.url.path,
                exc.error or exc.message,
            )
        else:
            _logger.info(
                "%s on %s %s: %s",
                exc.kind.value,
                request.method,
                request.url.path,
                exc.message,
            )
        return JSONResponse(status_code=exc.status_code, content=format_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """404 lists the available endpoints; other HTTP errors keep their detail."""
        if exc.status_code == 404:
            content = {
                "status": "ERROR",
                "message": "Endpoint not found",
                "availableEndpoints": list(ENDPOINTS.values()),
            }
        else:
            content = {"status": "ERROR", "message": str(exc.detail)}
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all: log and return a 500 InternalError envelope."""
        _logger.exception(
            "Unhandled exception on %s %s", request.method, request.url.path
        )
        err = InternalGatewayError(error=str(exc) or type(exc).__name__)
        if settings.ENVIRONMENT != "local":
            err.error = None
        return JSONResponse(status_code=500, content=format_error(err))

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        _logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    # Set all CORS enabled origins
    if settings.all_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.all_cors_origins,
            allow_credentials="*" not in settings.all_cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api_router, prefix=API_PREFIX)
    return app


app = create_app()
