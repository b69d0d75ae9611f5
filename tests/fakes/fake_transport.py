"""Transporte fake em memória para testes deterministas.

O teste dirige a conexão chamando `emit(...)` como o transporte real
faria, e inspeciona envios/logout/end registrados.
"""

from __future__ import annotations

from typing import Any

from app.domain.events import TransportEvent
from app.protocols.transport import EventCallback
from utils.errors import TransportError


class FakeTransport:
    """Implementa TransportProtocol sem rede."""

    def __init__(
        self,
        *,
        start_error: Exception | None = None,
        on_start: list[TransportEvent] | None = None,
    ) -> None:
        self._start_error = start_error
        self._on_start = list(on_start or [])
        self._emit: EventCallback | None = None
        self.started_with: bytes | None = None
        self.started = False
        self.sent: list[tuple[str, dict[str, Any]]] = []
        self.send_errors: dict[str, Exception] = {}
        self.contacts: list[dict[str, Any]] = []
        self.groups: list[dict[str, Any]] = []
        self.logout_error: Exception | None = None
        self.logged_out = False
        self.ended = False

    async def start(self, credentials: bytes | None, emit: EventCallback) -> None:
        if self._start_error is not None:
            raise self._start_error
        self.started = True
        self.started_with = credentials
        self._emit = emit
        for event in self._on_start:
            emit(event)

    def emit(self, event: TransportEvent) -> None:
        if self._emit is None:
            raise RuntimeError("transporte não iniciado")
        self._emit(event)

    async def send(self, address: str, payload: dict[str, Any]) -> Any:
        error = self.send_errors.get(address)
        if error is not None:
            raise error
        self.sent.append((address, payload))
        return {"key": {"remoteJid": address}}

    async def fetch_contacts(self) -> list[dict[str, Any]]:
        return list(self.contacts)

    async def fetch_groups(self) -> list[dict[str, Any]]:
        return list(self.groups)

    async def logout(self) -> None:
        if self.logout_error is not None:
            raise self.logout_error
        self.logged_out = True

    async def end(self) -> None:
        self.ended = True


class FakeTransportFactory:
    """Factory que devolve transportes pré-configurados em ordem.

    Sem transportes enfileirados, cria FakeTransport padrão.
    """

    def __init__(self, *transports: FakeTransport | Exception) -> None:
        self._queued: list[FakeTransport | Exception] = list(transports)
        self.created: list[FakeTransport] = []

    def __call__(self) -> FakeTransport:
        item = self._queued.pop(0) if self._queued else FakeTransport()
        if isinstance(item, Exception):
            raise item
        self.created.append(item)
        return item

    @property
    def current(self) -> FakeTransport:
        return self.created[-1]


def rate_limited() -> TransportError:
    return TransportError("rate-limited")
