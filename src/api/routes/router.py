"""Agregador de rotas — registra health e os endpoints do WhatsApp.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.routes.health.router import router as health_router
from api.routes.whatsapp.router import router as whatsapp_router
from api.security import require_api_key

API_PREFIX = "/api"


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter com /health, /ready e /api/*.
    """
    api_router = APIRouter()

    # Probes na raiz (sem API key) e /api/health para clientes da API
    api_router.include_router(health_router, tags=["health"])
    api_router.include_router(health_router, prefix=API_PREFIX, tags=["health"])

    api_router.include_router(
        whatsapp_router,
        prefix=API_PREFIX,
        tags=["whatsapp"],
        dependencies=[Depends(require_api_key)],
    )

    return api_router
