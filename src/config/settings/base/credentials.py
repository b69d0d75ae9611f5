"""Settings do store de credenciais da sessão WhatsApp.

As credenciais são um blob opaco gerado pelo transporte; perdê-las
obriga a ler o QR novamente.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

CredentialStoreBackend = Literal["memory", "file", "redis"]

_VALID_BACKENDS = ("memory", "file", "redis")


@dataclass(frozen=True)
class CredentialStoreSettings:
    """Configurações do store de credenciais.

    Attributes:
        backend: memory (dev/test), file (diretório por sessão) ou redis
        sessions_dir: Diretório base do backend file
        redis_url: URL do Redis (backend redis)
        redis_key_prefix: Namespace das chaves no Redis
    """

    backend: CredentialStoreBackend = "file"
    sessions_dir: str = "sessions"
    redis_url: str = ""
    redis_key_prefix: str = "credentials:"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do store.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in _VALID_BACKENDS:
            errors.append(f"CREDENTIAL_STORE_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append("CREDENTIAL_STORE_BACKEND=memory proibido em staging/production")

        if self.backend == "file" and not self.sessions_dir:
            errors.append("CREDENTIAL_SESSIONS_DIR não pode ser vazio")

        if self.backend == "redis" and not self.redis_url:
            errors.append("REDIS_URL obrigatório para CREDENTIAL_STORE_BACKEND=redis")

        return errors


def _load_credentials_from_env() -> CredentialStoreSettings:
    backend_str = os.getenv("CREDENTIAL_STORE_BACKEND", "file").lower()
    backend: CredentialStoreBackend = (
        backend_str if backend_str in _VALID_BACKENDS else "file"  # type: ignore[assignment]
    )
    return CredentialStoreSettings(
        backend=backend,
        sessions_dir=os.getenv("CREDENTIAL_SESSIONS_DIR", "sessions"),
        redis_url=os.getenv("REDIS_URL", ""),
        redis_key_prefix=os.getenv("CREDENTIAL_REDIS_KEY_PREFIX", "credentials:"),
    )


@lru_cache(maxsize=1)
def get_credential_store_settings() -> CredentialStoreSettings:
    """Retorna instância cacheada de CredentialStoreSettings."""
    return _load_credentials_from_env()
