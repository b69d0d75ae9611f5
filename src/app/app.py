"""Entrypoint do serviço de envio WhatsApp.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 3000

Uso (desenvolvimento):
    python -m app.app
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.routes import create_api_router
from app.bootstrap import (
    WhatsAppServices,
    build_whatsapp_services,
    initialize_app,
    validate_runtime_settings,
)
from app.observability import CORRELATION_ID_HEADER, correlation_scope
from config.logging import get_logger
from config.settings import get_api_settings, get_base_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.responses import Response

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


def create_app(services: WhatsAppServices | None = None) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        services: Container pronto (testes); se None, é montado no
            startup a partir das settings de ambiente.

    Returns:
        Aplicação FastAPI configurada.
    """
    base = get_base_settings()
    service_name = base.service_name

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: valida settings, monta serviços e inicia a conexão.

        Shutdown: encerra a conexão, drena webhooks e fecha clientes.
        """
        logger.info("app_starting", extra={"service": service_name})
        validate_runtime_settings()

        app.state.services = services or build_whatsapp_services()
        # initialize nunca levanta: falha vira estado ERROR visível em /api/status
        await app.state.services.start()

        yield

        logger.info("app_shutting_down", extra={"service": service_name})
        await app.state.services.aclose()

    fastapi_app = FastAPI(
        title="WhatsApp Sender",
        description="Sessão WhatsApp e API de envio de mensagens",
        version="1.0.0",
        debug=base.debug,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    fastapi_app.state.service_name = service_name

    api_settings = get_api_settings()
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=list(api_settings.allowed_origins),
        allow_credentials="*" not in api_settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @fastapi_app.middleware("http")
    async def correlation_middleware(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_ID_HEADER)) as correlation_id:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response

    register_exception_handlers(fastapi_app)
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": service_name})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta."""
    import uvicorn

    api_settings = get_api_settings()
    logger.info("app_starting_uvicorn", extra={"port": api_settings.port})
    uvicorn.run(
        "app.app:app",
        host=api_settings.host,
        port=api_settings.port,
        reload=get_base_settings().is_development,
    )


if __name__ == "__main__":
    main()
