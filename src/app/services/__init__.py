"""Serviços de aplicação.

Núcleo de conexão e envio (sem IO direto de persistência).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.addressing import is_group_address, normalize_target
from app.services.bulk_dispatcher import BulkDispatcher
from app.services.connection_manager import ConnectionManager
from app.services.message_dispatcher import MessageDispatcher
from app.services.webhook_notifier import WebhookNotifier

__all__ = [
    "BulkDispatcher",
    "ConnectionManager",
    "MessageDispatcher",
    "WebhookNotifier",
    "is_group_address",
    "normalize_target",
]
