"""Protocolos e contratos do core da aplicação."""

from .credential_store import CredentialStoreProtocol
from .transport import EventCallback, TransportFactory, TransportProtocol

__all__ = [
    "CredentialStoreProtocol",
    "EventCallback",
    "TransportFactory",
    "TransportProtocol",
]
