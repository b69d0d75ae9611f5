"""Exceções de domínio do serviço de envio WhatsApp."""

from __future__ import annotations


class WhatsAppServiceError(RuntimeError):
    """Base para falhas do núcleo de conexão e envio."""


class NotConnectedError(WhatsAppServiceError):
    """Operação de envio/consulta fora do estado CONNECTED.

    Levantada antes de qualquer chamada ao transporte.
    """

    def __init__(self, message: str = "WhatsApp não está conectado") -> None:
        super().__init__(message)


class InvalidTargetError(WhatsAppServiceError, ValueError):
    """Destino sem dígitos ou vazio; não pode virar endereço do protocolo."""


class TransportError(WhatsAppServiceError):
    """Falha reportada pelo transporte (rede, serialização, rejeição remota).

    Implementações de transporte levantam esta exceção; o núcleo
    repassa sem alterar.
    """


class PersistenceError(WhatsAppServiceError):
    """Falha de leitura/escrita no store de credenciais."""


class WebhookError(WhatsAppServiceError):
    """Falha de entrega de webhook. Nunca sai do notifier."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
