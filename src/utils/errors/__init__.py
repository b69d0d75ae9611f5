"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    InvalidTargetError,
    NotConnectedError,
    PersistenceError,
    TransportError,
    WebhookError,
    WhatsAppServiceError,
)

__all__ = [
    "InvalidTargetError",
    "NotConnectedError",
    "PersistenceError",
    "TransportError",
    "WebhookError",
    "WhatsAppServiceError",
]
