"""Tests for auxiliary endpoints: health, info, test-connection and the 404 envelope."""

from datetime import datetime
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from tests.utils.connection import FakeDriverError, make_connection


def test_health(client: TestClient, mock_connect: MagicMock) -> None:
    r = client.get("/api/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "OK"
    assert body["version"] == "1.0.0"
    assert "timestamp" in body
    mock_connect.assert_not_called()


def test_info(client: TestClient) -> None:
    r = client.get("/api/info")
    assert r.status_code == 200
    body = r.json()
    assert body["productType"] == "firebird"
    assert body["endpoints"]["query"] == "POST /api/query"
    assert body["allowedVerbs"]["query"] == ["SELECT"]
    assert "CREATE" in body["allowedVerbs"]["execute"]


def test_test_connection_ok(client: TestClient, mock_connect: MagicMock) -> None:
    conn = make_connection(
        columns=["CURRENT_TIMESTAMP"], rows=[(datetime(2026, 10, 19, 9, 15, 0),)]
    )
    mock_connect.return_value = conn

    r = client.get("/api/test-connection")

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "OK"
    assert body["serverTime"] == "2026-10-19T09:15:00"
    assert body["config"] == {
        "host": "db.test",
        "port": 3050,
        "database": "/data/test.fdb",
        "user": "SYSDBA",
    }
    assert "masterkey" not in r.text
    conn.close.assert_called_once()


def test_test_connection_unreachable(client: TestClient, mock_connect: MagicMock) -> None:
    mock_connect.side_effect = FakeDriverError("connection refused")

    r = client.get("/api/test-connection")

    assert r.status_code == 500
    body = r.json()
    assert body["kind"] == "ConnectionError"
    assert body["error"] == "connection refused"


def test_test_connection_query_failure(client: TestClient, mock_connect: MagicMock) -> None:
    conn = make_connection(execute_error=FakeDriverError("no permission for read"))
    mock_connect.return_value = conn

    r = client.get("/api/test-connection")

    assert r.status_code == 500
    assert r.json()["kind"] == "QueryError"
    assert r.json()["message"] == "Error executing test query"
    conn.close.assert_called_once()


def test_unknown_endpoint(client: TestClient) -> None:
    r = client.get("/api/nope")
    assert r.status_code == 404
    body = r.json()
    assert body["status"] == "ERROR"
    assert body["message"] == "Endpoint not found"
    assert "POST /api/query" in body["availableEndpoints"]


def test_wrong_method(client: TestClient) -> None:
    r = client.get("/api/query")
    assert r.status_code == 405
    assert r.json()["status"] == "ERROR"
