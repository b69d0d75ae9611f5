"""Store de credenciais em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Reiniciar o processo perde
as credenciais e obriga nova leitura do QR.
"""

from __future__ import annotations

from app.protocols.credential_store import CredentialStoreProtocol


class MemoryCredentialStore(CredentialStoreProtocol):
    """Store de credenciais em memória — apenas para dev/test."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._store: dict[str, bytes] = dict(initial or {})
        self.save_count = 0

    async def load(self, session_name: str) -> bytes | None:
        return self._store.get(session_name)

    async def save(self, session_name: str, credentials: bytes) -> None:
        self._store[session_name] = bytes(credentials)
        self.save_count += 1

    async def delete(self, session_name: str) -> bool:
        return self._store.pop(session_name, None) is not None

    def snapshot(self) -> dict[str, bytes]:
        """Cópia do conteúdo (apenas para testes)."""
        return dict(self._store)
