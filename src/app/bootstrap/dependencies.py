"""Factories de dependências — implementações concretas por configuração.

Centraliza a escolha do store de credenciais e a resolução da
factory do transporte a partir das settings.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client
from app.infra.stores import (
    FileCredentialStore,
    MemoryCredentialStore,
    RedisCredentialStore,
)
from utils.errors import TransportError

if TYPE_CHECKING:
    from app.protocols.credential_store import CredentialStoreProtocol
    from app.protocols.transport import TransportFactory, TransportProtocol
    from config.settings import BaseSettings, CredentialStoreSettings

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Credential Store Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_credential_store(
    settings: CredentialStoreSettings,
    base: BaseSettings,
) -> CredentialStoreProtocol:
    """Cria store de credenciais conforme CREDENTIAL_STORE_BACKEND.

    - "memory": MemoryCredentialStore (dev/test; perde a sessão no restart)
    - "file": FileCredentialStore (diretório por sessão)
    - "redis": RedisCredentialStore

    Raises:
        ValueError: Backend inválido ou REDIS_URL ausente.
    """
    backend = settings.backend

    if backend == "redis":
        client = create_async_redis_client(settings.redis_url)
        store: CredentialStoreProtocol = RedisCredentialStore(
            client, key_prefix=settings.redis_key_prefix
        )
    elif backend == "file":
        store = FileCredentialStore(settings.sessions_dir)
    elif backend == "memory":
        if not base.is_development:
            logger.warning(
                "memory_store_in_non_dev",
                extra={"backend": "memory", "environment": base.environment},
            )
        store = MemoryCredentialStore()
    else:
        msg = f"CREDENTIAL_STORE_BACKEND inválido: {backend}"
        raise ValueError(msg)

    logger.info("credential_store_created", extra={"backend": backend})
    return store


# ──────────────────────────────────────────────────────────────────────────────
# Transport Factory
# ──────────────────────────────────────────────────────────────────────────────


def load_transport_factory(path: str) -> TransportFactory:
    """Resolve a factory do transporte a partir de "modulo:callable".

    A resolução é adiada até a primeira conexão: caminho ausente ou
    inválido vira TransportError no initialize (estado ERROR), sem
    derrubar o boot da API.
    """
    module_name, _, attr_name = path.partition(":")

    def factory() -> TransportProtocol:
        if not module_name or not attr_name:
            raise TransportError("WHATSAPP_TRANSPORT_FACTORY não configurado")
        try:
            module = importlib.import_module(module_name)
            target = getattr(module, attr_name)
        except (ImportError, AttributeError) as exc:
            raise TransportError(f"Transporte não encontrado: {path}") from exc
        return target()

    return factory
