"""Protocolo de persistência das credenciais da sessão."""

from __future__ import annotations

from abc import ABC, abstractmethod


class CredentialStoreProtocol(ABC):
    """Contrato assíncrono para o blob de credenciais por sessão.

    Implementações traduzem falhas do backend em PersistenceError.
    """

    @abstractmethod
    async def load(self, session_name: str) -> bytes | None: ...

    @abstractmethod
    async def save(self, session_name: str, credentials: bytes) -> None: ...

    @abstractmethod
    async def delete(self, session_name: str) -> bool: ...

    async def aclose(self) -> None:
        """Libera conexões do backend no shutdown (padrão: nada a fazer)."""
        return None
