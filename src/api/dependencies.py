"""Dependencies FastAPI — acesso ao container de serviços."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException, Request, status

if TYPE_CHECKING:
    from app.bootstrap import WhatsAppServices


def get_services(request: Request) -> WhatsAppServices:
    """Container montado no lifespan (app.state.services)."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Serviços não inicializados",
        )
    return services
