"""Endpoints de health check (liveness e readiness)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fsm import ConnectionState

logger = logging.getLogger(__name__)

router = APIRouter()

# Estados em que a sessão está funcional ou em pareamento
READY_STATES = frozenset({ConnectionState.CONNECTED, ConnectionState.AWAITING_SCAN})


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


def _service_name(request: Request) -> str:
    return getattr(request.app.state, "service_name", "whatsapp_sender")


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe — verifica se o processo está respondendo."""
    return HealthResponse(
        status="healthy",
        service=_service_name(request),
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe baseada no estado da conexão.

    Pronto em CONNECTED ou AWAITING_SCAN; 503 em DISCONNECTED/ERROR
    (ERROR exige intervenção, DISCONNECTED indica reconexão em curso).
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        return JSONResponse(
            content={"status": "not_ready", "error": "services_not_initialized"},
            status_code=503,
        )

    connection = services.connection.get_state()
    ready = connection.state in READY_STATES
    if not ready:
        logger.info("readiness_not_ready", extra={"state": connection.state.name})

    payload = {
        "status": "ready" if ready else "not_ready",
        "connection": connection.to_dict(),
        "reconnect_pending": services.connection.has_pending_reconnect,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)
