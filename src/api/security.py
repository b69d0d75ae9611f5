"""Autenticação por API key nas rotas /api."""

from __future__ import annotations

import hmac
import logging

from fastapi import HTTPException, Request, status

from config.settings import get_api_settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"
API_KEY_QUERY_PARAM = "api_key"


async def require_api_key(request: Request) -> None:
    """Dependency: valida x-api-key (header) ou api_key (query).

    Sem efeito quando ENABLE_API_KEY=false.

    Raises:
        HTTPException: 401 se a chave estiver ausente ou incorreta.
    """
    settings = get_api_settings()
    if not settings.api_key_enabled:
        return

    provided = request.headers.get(API_KEY_HEADER) or request.query_params.get(
        API_KEY_QUERY_PARAM, ""
    )
    if (
        provided
        and settings.api_key
        and hmac.compare_digest(provided.encode(), settings.api_key.encode())
    ):
        return

    logger.warning("api_key_rejected", extra={"path": request.url.path})
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="API key inválida ou ausente",
    )
