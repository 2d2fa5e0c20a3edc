"""Unit tests for core.connection.manager: one connection per request, released once."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from sqlgateway.core.connection import ConnectionManager, get_connection_manager
from sqlgateway.core.errors import DatabaseConnectionError
from sqlgateway.models import ConnectionConfig, VerbCategory
from tests.utils.connection import FakeDriverError, make_connection


@patch("sqlgateway.core.connection.manager.connect")
def test_acquire_opens_fresh_connection_each_time(
    mock_connect: MagicMock, config: ConnectionConfig
) -> None:
    mock_connect.side_effect = [make_connection(), make_connection()]
    pm = ConnectionManager()

    h1 = pm.acquire(config, VerbCategory.READ)
    h2 = pm.acquire(config, VerbCategory.READ)

    assert h1.conn is not h2.conn
    assert mock_connect.call_count == 2
    pm.release(h1)
    pm.release(h2)


@patch("sqlgateway.core.connection.manager.connect")
def test_acquire_autocommit_only_for_ddl(mock_connect: MagicMock, config: ConnectionConfig) -> None:
    pm = ConnectionManager()
    for category, expected in [
        (VerbCategory.READ, False),
        (VerbCategory.WRITE, False),
        (VerbCategory.DDL, True),
    ]:
        mock_connect.reset_mock()
        pm.release(pm.acquire(config, category))
        mock_connect.assert_called_once_with(config, autocommit=expected)


@patch("sqlgateway.core.connection.manager.connect")
def test_acquire_failure_raises_connection_error(
    mock_connect: MagicMock, config: ConnectionConfig
) -> None:
    mock_connect.side_effect = FakeDriverError("Your user name and password are not defined")
    with pytest.raises(DatabaseConnectionError) as exc:
        ConnectionManager().acquire(config, VerbCategory.READ)
    assert exc.value.kind.value == "ConnectionError"
    assert "password" in exc.value.error


def test_release_closes_once(config: ConnectionConfig) -> None:
    conn = make_connection()
    pm = ConnectionManager()
    with patch("sqlgateway.core.connection.manager.connect", return_value=conn):
        handle = pm.acquire(config, VerbCategory.READ)
    pm.release(handle)
    pm.release(handle)
    conn.close.assert_called_once()
    conn.rollback.assert_not_called()
    assert handle.released is True


def test_release_failed_rolls_back_first(config: ConnectionConfig) -> None:
    conn = make_connection()
    calls: list[str] = []
    conn.rollback.side_effect = lambda: calls.append("rollback")
    conn.close.side_effect = lambda: calls.append("close")
    pm = ConnectionManager()
    with patch("sqlgateway.core.connection.manager.connect", return_value=conn):
        handle = pm.acquire(config, VerbCategory.WRITE)
    pm.release(handle, failed=True)
    assert calls == ["rollback", "close"]


def test_release_swallows_close_errors(config: ConnectionConfig) -> None:
    conn = make_connection()
    conn.rollback.side_effect = FakeDriverError("connection lost")
    conn.close.side_effect = FakeDriverError("connection lost")
    pm = ConnectionManager()
    with patch("sqlgateway.core.connection.manager.connect", return_value=conn):
        handle = pm.acquire(config, VerbCategory.WRITE)
    pm.release(handle, failed=True)
    assert handle.released is True


@patch("sqlgateway.core.connection.manager.connect")
def test_scoped_connection_releases_on_success(
    mock_connect: MagicMock, config: ConnectionConfig
) -> None:
    conn = make_connection()
    mock_connect.return_value = conn
    with ConnectionManager().connection(config, VerbCategory.READ) as handle:
        assert handle.conn is conn
    conn.close.assert_called_once()
    conn.rollback.assert_not_called()


@patch("sqlgateway.core.connection.manager.connect")
def test_scoped_connection_releases_on_error(
    mock_connect: MagicMock, config: ConnectionConfig
) -> None:
    conn = make_connection()
    mock_connect.return_value = conn
    with pytest.raises(RuntimeError, match="formatting failed"):
        with ConnectionManager().connection(config, VerbCategory.WRITE):
            raise RuntimeError("formatting failed")
    conn.rollback.assert_called_once()
    conn.close.assert_called_once()


def test_close_error_does_not_mask_original(config: ConnectionConfig) -> None:
    conn = make_connection()
    conn.close.side_effect = FakeDriverError("already detached")
    with patch("sqlgateway.core.connection.manager.connect", return_value=conn):
        with pytest.raises(ValueError, match="original"):
            with ConnectionManager().connection(config, VerbCategory.READ):
                raise ValueError("original")


def test_get_connection_manager_is_shared() -> None:
    assert get_connection_manager() is get_connection_manager()


def test_release_logs_category(config: ConnectionConfig, caplog: pytest.LogCaptureFixture) -> None:
    conn = make_connection()
    pm = ConnectionManager()
    with patch("sqlgateway.core.connection.manager.connect", return_value=conn):
        handle = pm.acquire(config, VerbCategory.DDL)
    with caplog.at_level(logging.DEBUG, logger="sqlgateway.core.connection.manager"):
        pm.release(handle)
        pm.release(handle)
    releases = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Releasing")]
    assert releases == ["Releasing DDL connection to firebird (failed=False)"]
