"""Testes do composition root (factories, container e validação de boot)."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from app.bootstrap import build_whatsapp_services, validate_runtime_settings
from app.bootstrap.dependencies import create_credential_store, load_transport_factory
from app.domain.events import ConnectionOpened
from app.infra.stores import FileCredentialStore, MemoryCredentialStore, RedisCredentialStore
from config.settings import (
    BaseSettings,
    CredentialStoreSettings,
    WebhookSettings,
    WhatsAppSettings,
    get_api_settings,
    get_base_settings,
    get_credential_store_settings,
    get_webhook_settings,
    get_whatsapp_settings,
)
from fsm import ConnectionState
from tests.fakes.fake_transport import FakeTransport, FakeTransportFactory
from utils.errors import TransportError

_GETTERS = (
    get_api_settings,
    get_base_settings,
    get_credential_store_settings,
    get_webhook_settings,
    get_whatsapp_settings,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    for getter in _GETTERS:
        getter.cache_clear()
    yield
    for getter in _GETTERS:
        getter.cache_clear()


class TestLoadTransportFactory:
    def test_resolves_module_callable(self) -> None:
        factory = load_transport_factory("tests.fakes.fake_transport:FakeTransport")
        assert isinstance(factory(), FakeTransport)

    @pytest.mark.parametrize(
        "path",
        ["", "sem_separador", "modulo.que.nao.existe:Factory", "tests.fakes.fake_transport:Nada"],
    )
    def test_bad_path_fails_lazily(self, path: str) -> None:
        factory = load_transport_factory(path)

        with pytest.raises(TransportError):
            factory()


class TestCreateCredentialStore:
    def test_file_backend(self, tmp_path) -> None:
        store = create_credential_store(
            CredentialStoreSettings(backend="file", sessions_dir=str(tmp_path)),
            BaseSettings(),
        )
        assert isinstance(store, FileCredentialStore)

    def test_memory_backend(self) -> None:
        store = create_credential_store(
            CredentialStoreSettings(backend="memory"), BaseSettings(environment="staging")
        )
        assert isinstance(store, MemoryCredentialStore)

    def test_redis_backend(self) -> None:
        store = create_credential_store(
            CredentialStoreSettings(backend="redis", redis_url="redis://localhost:6379/0"),
            BaseSettings(),
        )
        assert isinstance(store, RedisCredentialStore)

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="CREDENTIAL_STORE_BACKEND"):
            create_credential_store(
                CredentialStoreSettings(backend="s3"),  # type: ignore[arg-type]
                BaseSettings(),
            )


class TestValidateRuntimeSettings:
    def test_development_only_warns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.delenv("WHATSAPP_TRANSPORT_FACTORY", raising=False)

        validate_runtime_settings()

    def test_production_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("CREDENTIAL_STORE_BACKEND", "memory")

        with pytest.raises(RuntimeError, match="production") as exc_info:
            validate_runtime_settings()

        assert "credentials:" in str(exc_info.value)


@pytest.mark.asyncio
async def test_container_start_and_close() -> None:
    factory = FakeTransportFactory()
    services = build_whatsapp_services(
        transport_factory=factory,
        credential_store=MemoryCredentialStore(),
        whatsapp_settings=WhatsAppSettings(transport_factory="x:y"),
        webhook_settings=WebhookSettings(),
    )

    await services.start()
    factory.current.emit(ConnectionOpened())
    await services.connection.wait_until_idle()
    assert services.connection.state == ConnectionState.CONNECTED
    assert services.bulk.default_delay_seconds == 2.0

    await services.aclose()

    assert factory.current.ended is True
    assert services.connection.state == ConnectionState.DISCONNECTED


@pytest.mark.asyncio
async def test_container_aclose_closes_credential_store() -> None:
    store = MemoryCredentialStore()
    store.aclose = AsyncMock()  # type: ignore[method-assign]
    services = build_whatsapp_services(
        transport_factory=FakeTransportFactory(),
        credential_store=store,
        whatsapp_settings=WhatsAppSettings(transport_factory="x:y"),
        webhook_settings=WebhookSettings(),
    )

    await services.start()
    await services.aclose()

    assert services.credential_store is store
    store.aclose.assert_awaited_once()
