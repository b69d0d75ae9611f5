"""Envelope de resposta e mapeamento de exceções para HTTP.

Sucesso:  {"success": true, "data": ...}
Falha:    {"success": false, "error": "..."}
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from utils.errors import InvalidTargetError, NotConnectedError, WhatsAppServiceError

logger = logging.getLogger(__name__)


def success(data: Any = None) -> dict[str, Any]:
    return {"success": True, "data": data}


def error_response(status_code: int, error: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, **extra},
    )


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def _not_connected_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))


async def _invalid_target_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def _validation_handler(request: Request, exc: Exception) -> JSONResponse:
    details = exc.errors() if isinstance(exc, RequestValidationError) else []
    fields = [".".join(str(part) for part in item.get("loc", ())[1:]) for item in details]
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Campos obrigatórios ausentes ou inválidos",
        fields=[field for field in fields if field],
    )


async def _service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "request_failed",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "request_unexpected_error",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Erro interno")


def register_exception_handlers(app: FastAPI) -> None:
    """Registra handlers do envelope de erro na aplicação."""
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(NotConnectedError, _not_connected_handler)
    app.add_exception_handler(InvalidTargetError, _invalid_target_handler)
    app.add_exception_handler(RequestValidationError, _validation_handler)
    app.add_exception_handler(WhatsAppServiceError, _service_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
