"""Contrato do transporte de protocolo (WhatsApp multi-device).

O transporte é externo: autenticação, criptografia, pareamento e
entrega ficam com ele. O núcleo só inicia, envia, consulta e encerra.
Falhas são reportadas como TransportError.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.events import TransportEvent

EventCallback = Callable[["TransportEvent"], None]


class TransportProtocol(Protocol):
    """Handle de uma conexão. Uma instância por tentativa de conexão."""

    async def start(self, credentials: bytes | None, emit: EventCallback) -> None:
        """Inicia a conexão e registra o callback de eventos.

        Args:
            credentials: Credenciais persistidas (None = parear via QR)
            emit: Callback síncrono, não bloqueante, para cada evento
        """
        ...

    async def send(self, address: str, payload: dict[str, Any]) -> Any:
        """Envia payload ({"text"}, {"image", "caption"} ou
        {"document", "file_name", "mimetype"}) ao endereço."""
        ...

    async def fetch_contacts(self) -> list[dict[str, Any]]: ...

    async def fetch_groups(self) -> list[dict[str, Any]]: ...

    async def logout(self) -> None:
        """Desvincula o dispositivo da conta."""
        ...

    async def end(self) -> None:
        """Fecha a conexão sem desvincular."""
        ...


TransportFactory = Callable[[], TransportProtocol]
