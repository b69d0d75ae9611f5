"""Store de credenciais no Redis (cliente assíncrono).

Chave por sessão, sem TTL: credenciais só saem no logout.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from app.protocols.credential_store import CredentialStoreProtocol
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

CREDENTIALS_PREFIX = "credentials:"


class RedisCredentialStore(CredentialStoreProtocol):
    """Store de credenciais usando Redis.

    Args:
        redis_client: Cliente Redis assíncrono (decode_responses=False)
        key_prefix: Namespace das chaves
    """

    def __init__(
        self,
        redis_client: AsyncRedis,
        key_prefix: str = CREDENTIALS_PREFIX,
    ) -> None:
        self._redis = redis_client
        self._prefix = key_prefix

    def _key(self, session_name: str) -> str:
        return f"{self._prefix}{session_name}"

    async def load(self, session_name: str) -> bytes | None:
        try:
            data = await self._redis.get(self._key(session_name))
        except RedisError as exc:
            logger.error(
                "credentials_load_failed",
                extra={"session_name": session_name, "error_type": type(exc).__name__},
            )
            raise PersistenceError("Falha ao ler credenciais no Redis") from exc
        if data is None:
            return None
        return data if isinstance(data, bytes) else str(data).encode()

    async def save(self, session_name: str, credentials: bytes) -> None:
        try:
            await self._redis.set(self._key(session_name), credentials)
        except RedisError as exc:
            logger.error(
                "credentials_save_failed",
                extra={"session_name": session_name, "error_type": type(exc).__name__},
            )
            raise PersistenceError("Falha ao gravar credenciais no Redis") from exc
        logger.debug("credentials_saved", extra={"session_name": session_name})

    async def delete(self, session_name: str) -> bool:
        try:
            result = await self._redis.delete(self._key(session_name))
        except RedisError as exc:
            raise PersistenceError("Falha ao remover credenciais no Redis") from exc
        return bool(result)

    async def aclose(self) -> None:
        """Fecha o cliente Redis (pool de conexões)."""
        await self._redis.aclose()
        logger.info("redis_credential_store_closed")
