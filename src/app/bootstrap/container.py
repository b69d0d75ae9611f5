"""Container de serviços do WhatsApp (composition root).

Substitui o singleton global: a aplicação monta um WhatsAppServices
no startup e injeta nas rotas; testes montam o seu com fakes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.bootstrap.dependencies import create_credential_store, load_transport_factory
from app.services import (
    BulkDispatcher,
    ConnectionManager,
    MessageDispatcher,
    WebhookNotifier,
)
from config.settings import (
    get_base_settings,
    get_credential_store_settings,
    get_webhook_settings,
    get_whatsapp_settings,
)

if TYPE_CHECKING:
    from app.protocols.credential_store import CredentialStoreProtocol
    from app.protocols.transport import TransportFactory
    from config.settings import WebhookSettings, WhatsAppSettings

logger = logging.getLogger(__name__)

WEBHOOK_DRAIN_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class WhatsAppServices:
    """Serviços montados e compartilhados pela aplicação."""

    connection: ConnectionManager
    dispatcher: MessageDispatcher
    bulk: BulkDispatcher
    notifier: WebhookNotifier
    credential_store: CredentialStoreProtocol

    async def start(self) -> None:
        await self.connection.initialize()

    async def aclose(self) -> None:
        """Shutdown ordenado: conexão, webhooks pendentes e clientes."""
        await self.connection.shutdown()
        await self.notifier.drain(timeout_seconds=WEBHOOK_DRAIN_TIMEOUT_SECONDS)
        await self.notifier.aclose()
        await self.credential_store.aclose()


def build_whatsapp_services(
    *,
    transport_factory: TransportFactory | None = None,
    credential_store: CredentialStoreProtocol | None = None,
    whatsapp_settings: WhatsAppSettings | None = None,
    webhook_settings: WebhookSettings | None = None,
    notifier: WebhookNotifier | None = None,
) -> WhatsAppServices:
    """Monta o grafo de serviços.

    Qualquer dependência omitida vem das settings de ambiente.
    """
    wa = whatsapp_settings or get_whatsapp_settings()

    if notifier is None:
        notifier = WebhookNotifier(webhook_settings or get_webhook_settings())

    if credential_store is None:
        credential_store = create_credential_store(
            get_credential_store_settings(), get_base_settings()
        )

    if transport_factory is None:
        transport_factory = load_transport_factory(wa.transport_factory)

    connection = ConnectionManager(
        transport_factory,
        credential_store,
        session_name=wa.session_name,
        reconnect_backoff_seconds=wa.reconnect_backoff_seconds,
        notifier=notifier,
    )
    dispatcher = MessageDispatcher(
        connection,
        default_country_code=wa.default_country_code,
        notifier=notifier,
    )
    bulk = BulkDispatcher(
        dispatcher,
        default_delay_seconds=wa.bulk_default_delay_seconds,
        max_targets=wa.bulk_max_targets,
    )

    logger.info(
        "whatsapp_services_built",
        extra={"session_name": wa.session_name, "webhook_enabled": notifier.enabled},
    )
    return WhatsAppServices(
        connection=connection,
        dispatcher=dispatcher,
        bulk=bulk,
        notifier=notifier,
        credential_store=credential_store,
    )
