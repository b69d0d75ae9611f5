"""Stores — implementações concretas de persistência de credenciais.

Módulos disponíveis:
    - memory_credential_store: Store em memória para desenvolvimento/testes
    - file_credential_store: Diretório por sessão em disco
    - redis_credential_store: Chave por sessão no Redis
"""

from __future__ import annotations

from app.infra.stores.file_credential_store import FileCredentialStore
from app.infra.stores.memory_credential_store import MemoryCredentialStore
from app.infra.stores.redis_credential_store import RedisCredentialStore

__all__ = [
    "FileCredentialStore",
    "MemoryCredentialStore",
    "RedisCredentialStore",
]
