"""Eventos tipados emitidos pelo transporte do protocolo.

O transporte entrega eventos por callback; o ConnectionManager os
enfileira e um único consumidor os processa em ordem.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class CloseReason(StrEnum):
    """Motivo de fechamento informado pelo transporte."""

    LOGGED_OUT = "logged_out"
    CONNECTION_LOST = "connection_lost"
    CONNECTION_CLOSED = "connection_closed"
    CONNECTION_REPLACED = "connection_replaced"
    RESTART_REQUIRED = "restart_required"
    TIMED_OUT = "timed_out"
    UNKNOWN = "unknown"

    @property
    def should_reconnect(self) -> bool:
        """Somente logout remoto encerra a sessão sem reconexão."""
        return self is not CloseReason.LOGGED_OUT


@dataclass(frozen=True, slots=True)
class PairingTokenIssued:
    """Transporte gerou (ou regenerou) o token de pareamento (QR)."""

    token: str


@dataclass(frozen=True, slots=True)
class ConnectionOpened:
    """Sessão autenticada e aberta."""


@dataclass(frozen=True, slots=True)
class ConnectionClosed:
    """Conexão encerrada pelo transporte."""

    reason: CloseReason = CloseReason.UNKNOWN


@dataclass(frozen=True, slots=True)
class CredentialsRotated:
    """Novas credenciais que precisam ser persistidas."""

    credentials: bytes

    def __repr__(self) -> str:
        # Nunca expor o segredo em logs/tracebacks
        return f"CredentialsRotated(<{len(self.credentials)} bytes>)"


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """Mensagem recebida pela sessão.

    Attributes:
        sender: Endereço de origem (remoteJid)
        text: Texto extraído (vazio para mídia)
        timestamp: Epoch em segundos informado pelo transporte
        from_me: Mensagem enviada pela própria conta
        kind: "notify" para mensagens novas, "append" para histórico
    """

    sender: str
    text: str = ""
    timestamp: int = 0
    from_me: bool = False
    kind: str = "notify"

    @property
    def is_new_incoming(self) -> bool:
        return self.kind == "notify" and not self.from_me


TransportEvent = (
    PairingTokenIssued
    | ConnectionOpened
    | ConnectionClosed
    | CredentialsRotated
    | InboundMessage
)
