import os
from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest

# Importing sqlgateway.main builds an app from the environment.
os.environ.setdefault("DB_HOST", "db.test")
os.environ.setdefault("DB_PORT", "3050")
os.environ.setdefault("DB_PATH", "/data/test.fdb")
os.environ.setdefault("DB_USER", "SYSDBA")
os.environ.setdefault("DB_PASSWORD", "masterkey")

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from sqlgateway.core.config import Settings  # noqa: E402
from sqlgateway.main import create_app  # noqa: E402
from sqlgateway.models import ConnectionConfig, ProductTypeEnum  # noqa: E402
from tests.utils.connection import FakeDriverError, make_config, make_connection  # noqa: E402


@pytest.fixture(autouse=True)
def _fake_driver_errors() -> Generator[None, None, None]:
    """Treat FakeDriverError as the Firebird driver's Error root."""
    with patch.dict(
        "sqlgateway.core.connection.driver.DRIVER_ERRORS",
        {ProductTypeEnum.FIREBIRD: (FakeDriverError,)},
    ):
        yield


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DB_HOST="db.test",
        DB_PORT=3050,
        DB_PATH="/data/test.fdb",
        DB_USER="SYSDBA",
        DB_PASSWORD="masterkey",
        ENVIRONMENT="local",
        SENTRY_DSN=None,
    )


@pytest.fixture
def config() -> ConnectionConfig:
    return make_config()


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def conn() -> MagicMock:
    return make_connection()


@pytest.fixture
def mock_connect(conn: MagicMock) -> Generator[MagicMock, None, None]:
    """Patch the driver connect used by ConnectionManager; returns *conn*."""
    with patch("sqlgateway.core.connection.manager.connect", return_value=conn) as m:
        yield m
