"""
Gateway data model: product types, verb categories, connection config,
statement requests and execution outcomes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProductTypeEnum(str, Enum):
    FIREBIRD = "firebird"
    POSTGRES = "postgres"
    MYSQL = "mysql"
    TRINO = "trino"


class EntryPointEnum(str, Enum):
    """Which route a statement arrived on: read path or write/DDL path."""

    QUERY = "query"
    EXECUTE = "execute"


class VerbCategory(str, Enum):
    READ = "READ"
    WRITE = "WRITE"
    DDL = "DDL"
    REJECTED = "REJECTED"


class ConnectionConfig(BaseModel):
    """Immutable connection parameters, built once at startup."""

    model_config = ConfigDict(frozen=True)

    product_type: ProductTypeEnum = ProductTypeEnum.FIREBIRD
    host: str = Field(min_length=1)
    port: int = Field(gt=0, le=65535)
    database: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: str = Field(min_length=1, repr=False)
    role: str | None = None
    charset: str = "UTF8"
    connect_timeout: int = 10

    def public_dict(self) -> dict[str, Any]:
        """Fields safe to echo back to a client (no password)."""
        return {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.username,
        }


class StatementRequest(BaseModel):
    """One incoming call: SQL text plus positional bind values."""

    model_config = ConfigDict(frozen=True)

    sql: str
    params: list[Any] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Execution outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rows:
    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class Affected:
    rows_affected: int


@dataclass(frozen=True)
class Acknowledged:
    pass


ExecutionOutcome = Rows | Affected | Acknowledged
