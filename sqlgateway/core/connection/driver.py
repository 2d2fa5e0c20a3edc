"""
DB connection helpers for the configured target database.

Uses firebird-driver (Firebird), psycopg (PostgreSQL), pymysql (MySQL) or
trino (Trino) based on product_type. These expose the attach / query /
commit / detach primitives the gateway is built on: connect(), execute(),
conn.commit(), conn.close().
"""

from typing import Any

import firebird.driver
import psycopg
import pymysql
import trino.exceptions
from firebird.driver import TPB, Isolation
from firebird.driver import connect as firebird_connect
from trino.auth import BasicAuthentication
from trino.dbapi import connect as trino_connect

from sqlgateway.models import ConnectionConfig, ProductTypeEnum

# DB-API Error roots per driver; used to tell driver failures from bugs.
DRIVER_ERRORS: dict[ProductTypeEnum, tuple[type[BaseException], ...]] = {
    ProductTypeEnum.FIREBIRD: (firebird.driver.Error,),
    ProductTypeEnum.POSTGRES: (psycopg.Error,),
    ProductTypeEnum.MYSQL: (pymysql.err.Error,),
    ProductTypeEnum.TRINO: (trino.exceptions.Error, trino.exceptions.TrinoQueryError),
}

SERVER_TIME_SQL: dict[ProductTypeEnum, str] = {
    ProductTypeEnum.FIREBIRD: "SELECT CURRENT_TIMESTAMP FROM RDB$DATABASE",
    ProductTypeEnum.POSTGRES: "SELECT CURRENT_TIMESTAMP",
    ProductTypeEnum.MYSQL: "SELECT CURRENT_TIMESTAMP",
    ProductTypeEnum.TRINO: "SELECT CURRENT_TIMESTAMP",
}

# Firebird detach rolls the main transaction back; DDL sessions start it with
# isc_tpb_autocommit instead of a session-level switch.
FIREBIRD_AUTOCOMMIT_TPB: bytes = TPB(
    isolation=Isolation.READ_COMMITTED, auto_commit=True
).get_buffer()


def driver_errors(product_type: ProductTypeEnum) -> tuple[type[BaseException], ...]:
    return DRIVER_ERRORS[product_type]


def firebird_dsn(config: ConnectionConfig) -> str:
    """Classic Firebird connection string: host/port:path."""
    return f"{config.host}/{config.port}:{config.database}"


def connect(config: ConnectionConfig, *, autocommit: bool = False) -> Any:
    """
    Open one new connection described by *config*.

    - autocommit: every statement commits as it completes. psycopg and pymysql
      use their session flag; Firebird gets an auto-commit default TPB on the
      main transaction. Trino commits each statement on its own.
    - connect_timeout applies to psycopg, pymysql and trino. firebird-driver's
      connect() has no timeout argument.
    """
    pt = config.product_type
    timeout = config.connect_timeout

    if pt == ProductTypeEnum.FIREBIRD:
        conn = firebird_connect(
            firebird_dsn(config),
            user=config.username,
            password=config.password,
            role=config.role,
            charset=config.charset,
        )
        if autocommit:
            conn.main_transaction.default_tpb = FIREBIRD_AUTOCOMMIT_TPB
        return conn
    if pt == ProductTypeEnum.POSTGRES:
        return psycopg.connect(
            host=config.host,
            port=config.port,
            dbname=config.database,
            user=config.username,
            password=config.password,
            connect_timeout=timeout,
            autocommit=autocommit,
        )
    if pt == ProductTypeEnum.MYSQL:
        return pymysql.connect(
            host=config.host,
            port=config.port,
            database=config.database,
            user=config.username,
            password=config.password,
            connect_timeout=timeout,
            autocommit=autocommit,
        )
    if pt == ProductTypeEnum.TRINO:
        return trino_connect(
            host=config.host,
            port=config.port,
            user=config.username,
            auth=BasicAuthentication(config.username, config.password),
            catalog=config.database,
            schema="default",
            source="sqlgateway",
            http_scheme="https",
            request_timeout=timeout,
        )
    raise ValueError(f"Unsupported product_type: {pt}")


def execute(conn: Any, sql: str, params: list[Any] | tuple | None = None) -> Any:
    """Execute SQL with positional bind values and return the open cursor."""
    cur = conn.cursor()
    if params:
        cur.execute(sql, params)
    else:
        cur.execute(sql)
    return cur


def cursor_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor result to list of dicts, column names as the driver reports them."""
    desc = cursor.description
    if not desc:
        return []
    names = [d[0] for d in desc]
    return [dict(zip(names, row, strict=True)) for row in cursor.fetchall()]


def affected_rows(cursor: Any) -> int:
    """
    Rows touched by the last DML statement.

    DB-API reports -1 (or None) when the count is unknown; fall back to 1
    in that case. This is a heuristic, not a driver guarantee.
    """
    count = getattr(cursor, "rowcount", None)
    if isinstance(count, int) and not isinstance(count, bool) and count >= 0:
        return count
    return 1
