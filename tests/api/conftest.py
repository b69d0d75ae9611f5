"""Fixtures da API: app com container montado sobre FakeTransport."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from app.bootstrap import WhatsAppServices, build_whatsapp_services
from app.domain.events import TransportEvent
from app.infra.stores import MemoryCredentialStore
from config.settings import WebhookSettings, WhatsAppSettings, get_api_settings
from tests.fakes.fake_transport import FakeTransportFactory


@dataclass
class ApiHarness:
    client: TestClient
    services: WhatsAppServices
    factory: FakeTransportFactory
    store: MemoryCredentialStore

    def emit(self, *events: TransportEvent) -> None:
        """Entrega eventos no event loop da aplicação e espera o processamento."""

        async def _emit() -> None:
            for event in events:
                self.factory.current.emit(event)
            await self.services.connection.wait_until_idle()

        self.client.portal.call(_emit)


@pytest.fixture
def harness(monkeypatch: pytest.MonkeyPatch) -> Iterator[ApiHarness]:
    monkeypatch.delenv("ENABLE_API_KEY", raising=False)
    get_api_settings.cache_clear()

    factory = FakeTransportFactory()
    store = MemoryCredentialStore()
    services = build_whatsapp_services(
        transport_factory=factory,
        credential_store=store,
        whatsapp_settings=WhatsAppSettings(
            session_name="api-test",
            transport_factory="tests.fakes.fake_transport:FakeTransport",
            bulk_default_delay_ms=0,
            bulk_max_targets=3,
        ),
        webhook_settings=WebhookSettings(),
    )
    with TestClient(create_app(services)) as client:
        yield ApiHarness(client=client, services=services, factory=factory, store=store)

    get_api_settings.cache_clear()
