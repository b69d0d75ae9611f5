"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from starlette.requests import Request

from api.routes.health.router import readiness_check
from app.domain.events import ConnectionOpened, PairingTokenIssued
from app.domain.results import ConnectionStatus
from app.observability import CORRELATION_ID_HEADER
from fsm import ConnectionState


def _build_request_with_state(state: SimpleNamespace) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/ready",
        "raw_path": b"/ready",
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


@pytest.mark.asyncio
async def test_readiness_without_services_is_not_ready() -> None:
    response = await readiness_check(_build_request_with_state(SimpleNamespace()))
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload == {"status": "not_ready", "error": "services_not_initialized"}


@pytest.mark.asyncio
async def test_readiness_reports_pending_reconnect() -> None:
    connection = MagicMock()
    connection.get_state.return_value = ConnectionStatus(state=ConnectionState.DISCONNECTED)
    connection.has_pending_reconnect = True
    request = _build_request_with_state(
        SimpleNamespace(services=SimpleNamespace(connection=connection))
    )

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["reconnect_pending"] is True
    assert payload["connection"]["state"] == "disconnected"


def test_health_is_always_healthy(harness) -> None:
    for path in ("/health", "/api/health"):
        response = harness.client.get(path)
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


def test_ready_follows_connection_state(harness) -> None:
    not_ready = harness.client.get("/ready")
    assert not_ready.status_code == 503
    assert not_ready.json()["connection"]["state"] == "disconnected"

    harness.emit(PairingTokenIssued("qr"))
    assert harness.client.get("/ready").status_code == 200

    harness.emit(ConnectionOpened())
    ready = harness.client.get("/ready")
    assert ready.status_code == 200
    assert ready.json()["status"] == "ready"
    assert ready.json()["connection"]["connected"] is True


def test_correlation_id_is_echoed_or_generated(harness) -> None:
    echoed = harness.client.get("/health", headers={CORRELATION_ID_HEADER: "req-123"})
    generated = harness.client.get("/health")

    assert echoed.headers[CORRELATION_ID_HEADER] == "req-123"
    assert len(generated.headers[CORRELATION_ID_HEADER]) == 32
