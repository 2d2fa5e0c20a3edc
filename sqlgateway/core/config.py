import logging
from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, ValidationError, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqlgateway.models import ConnectionConfig, ProductTypeEnum

_log = logging.getLogger(__name__)

REQUIRED_DB_SETTINGS = ("DB_HOST", "DB_PORT", "DB_PATH", "DB_USER", "DB_PASSWORD")


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "SQL Gateway"
    API_VERSION: str = "1.0.0"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3050
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: AnyUrl | None = None

    BACKEND_CORS_ORIGINS: Annotated[list[str] | str, BeforeValidator(parse_cors)] = [
        "*"
    ]

    # Target database: all five are required, startup aborts without them.
    DB_HOST: str
    DB_PORT: int
    DB_PATH: str
    DB_USER: str
    DB_PASSWORD: str

    DB_PRODUCT_TYPE: ProductTypeEnum = ProductTypeEnum.FIREBIRD
    DB_ROLE: str | None = None
    DB_CHARSET: str = "UTF8"
    DB_CONNECT_TIMEOUT: int = 10

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        origins = self.BACKEND_CORS_ORIGINS
        if isinstance(origins, str):
            origins = [origins]
        return [str(origin).rstrip("/") for origin in origins]

    def connection_config(self) -> ConnectionConfig:
        return ConnectionConfig(
            product_type=self.DB_PRODUCT_TYPE,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_PATH,
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            role=self.DB_ROLE,
            charset=self.DB_CHARSET,
            connect_timeout=self.DB_CONNECT_TIMEOUT,
        )


def _missing_fields(exc: ValidationError) -> list[str]:
    missing: list[str] = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        if loc:
            missing.append(str(loc[0]))
    return missing


def load_settings(**overrides: Any) -> Settings:
    """
    Build Settings from the environment. Incomplete database configuration
    is fatal: log it and exit with status 1.
    """
    try:
        settings = Settings(**overrides)
        settings.connection_config()
    except ValidationError as exc:
        fields = _missing_fields(exc)
        _log.critical(
            "Incomplete database configuration, check environment variables %s "
            "(invalid or missing: %s)",
            ", ".join(REQUIRED_DB_SETTINGS),
            ", ".join(fields) or "unknown",
        )
        raise SystemExit(1) from exc
    return settings
