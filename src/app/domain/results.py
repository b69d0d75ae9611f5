"""Resultados devolvidos pelas operações públicas do núcleo."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fsm.states import ConnectionState


@dataclass(frozen=True, slots=True)
class ConnectionStatus:
    """Fotografia do estado da conexão para leitores externos."""

    state: ConnectionState
    has_pairing_token: bool = False
    last_error: str | None = None

    @property
    def connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED

    def to_dict(self) -> dict[str, Any]:
        """Formato da API: {connected, state, hasQR} (+ lastError)."""
        data: dict[str, Any] = {
            "connected": self.connected,
            "state": self.state.value,
            "hasQR": self.has_pairing_token,
        }
        if self.last_error:
            data["lastError"] = self.last_error
        return data


@dataclass(frozen=True, slots=True)
class SendResult:
    """Resultado de um envio individual."""

    success: bool
    message: str
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True, slots=True)
class BulkItemResult:
    """Resultado de um destino dentro do envio em massa."""

    target: str
    success: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"number": self.target, "success": self.success}
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True, slots=True)
class BulkReport:
    """Resultados do envio em massa, na mesma ordem dos destinos."""

    results: tuple[BulkItemResult, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.results if item.success)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "results": [item.to_dict() for item in self.results],
        }


@dataclass(frozen=True, slots=True)
class LogoutAck:
    """Confirmação de logout."""

    success: bool = True
    message: str = "Logout realizado com sucesso"

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "message": self.message}
