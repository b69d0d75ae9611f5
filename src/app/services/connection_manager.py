"""Gerenciador do ciclo de vida da conexão com o WhatsApp.

Responsabilidades:
- Dono do handle do transporte e da máquina de estados da conexão
- Ciclo de vida do token de pareamento (QR)
- Persistência serializada das credenciais a cada rotação
- Política de reconexão (uma tentativa por queda, após backoff fixo)

Modelo de concorrência:
    O transporte entrega eventos por callback. O callback apenas
    enfileira o evento (marcado com a geração do transporte) e uma
    única task consumidora processa a fila em ordem. Eventos de
    gerações antigas (após logout, shutdown ou nova conexão) são
    descartados.

    initialize, reconexão, logout, shutdown e o processamento de
    eventos são serializados pelo mesmo lock de ciclo de vida, então
    logout e reconexão nunca se sobrepõem. A reconexão pendente é uma
    task cancelável: logout cancela antes de desmontar a sessão.

    Leitores (status, QR, dispatchers) só leem o estado já commitado.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import TYPE_CHECKING, Any

from app.domain.events import (
    CloseReason,
    ConnectionClosed,
    ConnectionOpened,
    CredentialsRotated,
    InboundMessage,
    PairingTokenIssued,
)
from app.domain.results import ConnectionStatus, LogoutAck
from config.logging import mask_address
from fsm import ConnectionState, StateTransition, create_state_machine
from utils.errors import NotConnectedError, PersistenceError

if TYPE_CHECKING:
    from app.domain.events import TransportEvent
    from app.protocols.credential_store import CredentialStoreProtocol
    from app.protocols.transport import TransportFactory, TransportProtocol
    from app.services.webhook_notifier import WebhookNotifier

logger = logging.getLogger(__name__)

DEFAULT_SESSION_NAME = "whatsapp-session"
DEFAULT_RECONNECT_BACKOFF_SECONDS = 3.0

# Estados que só fazem sentido com um transporte vivo
_TRANSPORT_BOUND_STATES = frozenset({ConnectionState.CONNECTED, ConnectionState.AWAITING_SCAN})


class ConnectionManager:
    """Máquina de estados da conexão dirigida por eventos do transporte.

    Args:
        transport_factory: Cria um transporte novo a cada conexão
        credential_store: Store das credenciais da sessão
        session_name: Chave das credenciais no store
        reconnect_backoff_seconds: Espera antes de reconectar após queda
        notifier: Observador de eventos (webhook), opcional
    """

    def __init__(
        self,
        transport_factory: TransportFactory,
        credential_store: CredentialStoreProtocol,
        *,
        session_name: str = DEFAULT_SESSION_NAME,
        reconnect_backoff_seconds: float = DEFAULT_RECONNECT_BACKOFF_SECONDS,
        notifier: WebhookNotifier | None = None,
    ) -> None:
        self._transport_factory = transport_factory
        self._store = credential_store
        self._session_name = session_name
        self._backoff_seconds = reconnect_backoff_seconds
        self._notifier = notifier

        self._fsm = create_state_machine(session_name)
        self._transport: TransportProtocol | None = None
        self._pairing_token: str | None = None
        self._last_error: str | None = None

        # Geração do transporte atual; eventos de outras gerações são descartados
        self._generation = 0
        self._events: asyncio.Queue[tuple[int, TransportEvent]] = asyncio.Queue()
        self._consumer_task: asyncio.Task[None] | None = None
        self._reconnect_task: asyncio.Task[None] | None = None

        self._lifecycle_lock = asyncio.Lock()
        self._credentials_lock = asyncio.Lock()

    # ──────────────────────────────────────────────────────────────
    # Leitura de estado
    # ──────────────────────────────────────────────────────────────

    @property
    def session_name(self) -> str:
        return self._session_name

    @property
    def state(self) -> ConnectionState:
        return self._fsm.current_state

    @property
    def history(self) -> list[StateTransition]:
        return self._fsm.history

    @property
    def has_pending_reconnect(self) -> bool:
        return self._reconnect_task is not None and not self._reconnect_task.done()

    def get_state(self) -> ConnectionStatus:
        """Fotografia do estado: {state, connected, has_pairing_token}."""
        return ConnectionStatus(
            state=self._fsm.current_state,
            has_pairing_token=self._pairing_token is not None,
            last_error=self._last_error,
        )

    def get_pairing_token(self) -> str | None:
        """Token de pareamento; só existe em AWAITING_SCAN."""
        return self._pairing_token

    def require_connected(self) -> TransportProtocol:
        """Retorna o transporte se CONNECTED.

        Raises:
            NotConnectedError: Em qualquer outro estado.
        """
        transport = self._transport
        if self._fsm.current_state != ConnectionState.CONNECTED or transport is None:
            raise NotConnectedError()
        return transport

    # ──────────────────────────────────────────────────────────────
    # Operações públicas
    # ──────────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Inicia (ou reinicia) o transporte com as credenciais persistidas.

        Sai de ERROR por reset explícito. Falhas (store ilegível,
        transporte ausente ou que falha ao iniciar) levam a ERROR,
        ficam visíveis em get_state() e não são retentadas.
        """
        async with self._lifecycle_lock:
            self._cancel_reconnect()
            if self._fsm.is_terminal:
                self._force_state(ConnectionState.DISCONNECTED, "initialize")
            self._last_error = None
            self._ensure_consumer()
            await self._restart_transport("initialize")

    async def logout(self) -> LogoutAck:
        """Desvincula a sessão.

        Cancela reconexão pendente, pede teardown ao transporte, força
        DISCONNECTED e apaga as credenciais. Erro do transporte é
        propagado sem alteração depois da limpeza local.
        """
        async with self._lifecycle_lock:
            self._cancel_reconnect()
            transport, self._transport = self._transport, None
            self._generation += 1
            try:
                if transport is not None:
                    await transport.logout()
            except Exception:
                await self._clear_session(propagate_persistence_error=False)
                raise
            await self._clear_session()

        logger.info("session_logged_out", extra={"session_name": self._session_name})
        return LogoutAck()

    async def _clear_session(self, *, propagate_persistence_error: bool = True) -> None:
        """Limpeza local do logout: DISCONNECTED e credenciais apagadas."""
        self._force_state(ConnectionState.DISCONNECTED, "logout")
        self._last_error = None
        try:
            await self._delete_credentials()
        except PersistenceError:
            if propagate_persistence_error:
                raise
            # O erro do transporte é o que sobe para o chamador
            logger.error(
                "credentials_delete_failed",
                extra={"session_name": self._session_name},
                exc_info=True,
            )

    async def shutdown(self) -> None:
        """Encerra o transporte sem apagar credenciais (parada do processo)."""
        async with self._lifecycle_lock:
            self._cancel_reconnect()
            await self._end_transport()
            if not self._fsm.is_terminal:
                self._force_state(ConnectionState.DISCONNECTED, "shutdown")

        consumer, self._consumer_task = self._consumer_task, None
        if consumer is not None and not consumer.done():
            consumer.cancel()
            await asyncio.gather(consumer, return_exceptions=True)
        logger.info("connection_manager_stopped", extra={"session_name": self._session_name})

    async def wait_until_idle(self) -> None:
        """Aguarda a fila de eventos esvaziar (todos processados)."""
        await self._events.join()

    # ──────────────────────────────────────────────────────────────
    # Transporte
    # ──────────────────────────────────────────────────────────────

    async def _restart_transport(self, trigger: str) -> None:
        """Derruba o transporte atual (se houver) e inicia um novo.

        Deve ser chamado com o lock de ciclo de vida.
        """
        await self._end_transport()
        if self._fsm.current_state in _TRANSPORT_BOUND_STATES:
            # Estado e token pertenciam ao transporte encerrado
            self._force_state(ConnectionState.DISCONNECTED, trigger)
        try:
            credentials = await self._load_credentials()
            transport = self._transport_factory()
        except Exception as exc:
            self._enter_error(trigger, exc)
            return

        self._generation += 1
        emit = functools.partial(self._enqueue, self._generation)
        self._transport = transport
        try:
            await transport.start(credentials, emit)
        except Exception as exc:
            self._transport = None
            self._generation += 1
            self._enter_error(trigger, exc)
            return

        logger.info(
            "transport_started",
            extra={
                "session_name": self._session_name,
                "trigger": trigger,
                "has_credentials": credentials is not None,
                "generation": self._generation,
            },
        )

    async def _end_transport(self) -> None:
        transport, self._transport = self._transport, None
        self._generation += 1
        if transport is None:
            return
        try:
            await transport.end()
        except Exception as exc:
            # Transporte já descartado; falha no end não muda o estado
            logger.warning("transport_end_failed", extra={"error_type": type(exc).__name__})

    def _enqueue(self, generation: int, event: TransportEvent) -> None:
        """Callback entregue ao transporte. Deve rodar no event loop."""
        self._events.put_nowait((generation, event))

    # ──────────────────────────────────────────────────────────────
    # Consumidor de eventos
    # ──────────────────────────────────────────────────────────────

    def _ensure_consumer(self) -> None:
        if self._consumer_task is None or self._consumer_task.done():
            self._consumer_task = asyncio.create_task(
                self._consume_events(),
                name=f"whatsapp-events-{self._session_name}",
            )

    async def _consume_events(self) -> None:
        while True:
            generation, event = await self._events.get()
            try:
                async with self._lifecycle_lock:
                    if generation != self._generation:
                        logger.debug(
                            "stale_transport_event_dropped",
                            extra={"event_type": type(event).__name__},
                        )
                        continue
                    await self._handle_event(event)
            except Exception:
                logger.exception(
                    "transport_event_failed",
                    extra={"event_type": type(event).__name__},
                )
            finally:
                self._events.task_done()

    async def _handle_event(self, event: TransportEvent) -> None:
        if isinstance(event, CredentialsRotated):
            await self._on_credentials_rotated(event)
        elif isinstance(event, PairingTokenIssued):
            self._on_pairing_token(event)
        elif isinstance(event, ConnectionOpened):
            self._on_opened()
        elif isinstance(event, ConnectionClosed):
            await self._on_closed(event)
        elif isinstance(event, InboundMessage):
            self._on_inbound(event)
        else:
            logger.warning("unknown_transport_event", extra={"event_type": type(event).__name__})

    async def _on_credentials_rotated(self, event: CredentialsRotated) -> None:
        try:
            await self._save_credentials(event.credentials)
        except PersistenceError as exc:
            # Sem credenciais duráveis não dá para manter CONNECTED
            self._enter_error("credentials_rotated", exc)
            await self._end_transport()

    def _on_pairing_token(self, event: PairingTokenIssued) -> None:
        state = self._fsm.current_state
        if state not in (ConnectionState.DISCONNECTED, ConnectionState.AWAITING_SCAN):
            logger.warning("pairing_token_ignored", extra={"state": state.name})
            return
        if self._transition(ConnectionState.AWAITING_SCAN, "pairing_token_issued", token=event.token):
            logger.info("pairing_token_issued", extra={"session_name": self._session_name})

    def _on_opened(self) -> None:
        if self._transition(ConnectionState.CONNECTED, "transport_opened"):
            self._last_error = None
            self._notify("connected", {"message": "WhatsApp conectado com sucesso"})

    async def _on_closed(self, event: ConnectionClosed) -> None:
        state = self._fsm.current_state
        if state == ConnectionState.ERROR:
            return

        # Transporte morto: eventos remanescentes dele são descartados
        self._transport = None
        self._generation += 1

        if state != ConnectionState.DISCONNECTED:
            self._transition(
                ConnectionState.DISCONNECTED,
                "transport_closed",
                metadata={"reason": event.reason.value},
            )

        reconnecting = event.reason.should_reconnect
        if reconnecting:
            self._schedule_reconnect(event.reason)
        else:
            logger.info("session_logged_out_remotely", extra={"session_name": self._session_name})
            try:
                await self._delete_credentials()
            except PersistenceError as exc:
                self._last_error = str(exc)
                logger.error("credentials_delete_failed", extra={"error": str(exc)})

        self._notify(
            "disconnected",
            {"reason": event.reason.value, "reconnecting": reconnecting},
        )

    def _on_inbound(self, event: InboundMessage) -> None:
        if not event.is_new_incoming:
            return
        logger.debug("inbound_message", extra={"sender": mask_address(event.sender)})
        self._notify(
            "message",
            {"from": event.sender, "message": event.text, "timestamp": event.timestamp},
        )

    # ──────────────────────────────────────────────────────────────
    # Reconexão
    # ──────────────────────────────────────────────────────────────

    def _schedule_reconnect(self, reason: CloseReason) -> None:
        if self.has_pending_reconnect:
            logger.info("reconnect_already_scheduled", extra={"reason": reason.value})
            return
        self._reconnect_task = asyncio.create_task(
            self._reconnect_after(self._backoff_seconds),
            name=f"whatsapp-reconnect-{self._session_name}",
        )
        logger.info(
            "reconnect_scheduled",
            extra={"reason": reason.value, "backoff_seconds": self._backoff_seconds},
        )

    async def _reconnect_after(self, delay_seconds: float) -> None:
        await asyncio.sleep(delay_seconds)
        async with self._lifecycle_lock:
            if asyncio.current_task() is not self._reconnect_task:
                return
            self._reconnect_task = None
            if self._fsm.current_state != ConnectionState.DISCONNECTED:
                logger.info("reconnect_skipped", extra={"state": self._fsm.current_state.name})
                return
            logger.info("reconnect_started", extra={"session_name": self._session_name})
            await self._restart_transport("reconnect")

    def _cancel_reconnect(self) -> None:
        task, self._reconnect_task = self._reconnect_task, None
        if task is not None and not task.done():
            task.cancel()
            logger.info("reconnect_cancelled", extra={"session_name": self._session_name})

    # ──────────────────────────────────────────────────────────────
    # Credenciais (escritas serializadas por sessão)
    # ──────────────────────────────────────────────────────────────

    async def _load_credentials(self) -> bytes | None:
        async with self._credentials_lock:
            return await self._store.load(self._session_name)

    async def _save_credentials(self, credentials: bytes) -> None:
        async with self._credentials_lock:
            await self._store.save(self._session_name, credentials)

    async def _delete_credentials(self) -> bool:
        async with self._credentials_lock:
            return await self._store.delete(self._session_name)

    # ──────────────────────────────────────────────────────────────
    # Estado
    # ──────────────────────────────────────────────────────────────

    def _transition(
        self,
        target: ConnectionState,
        trigger: str,
        *,
        token: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        result = self._fsm.transition(target, trigger, metadata)
        if not result.success or result.transition is None:
            logger.warning(
                "connection_transition_rejected",
                extra={
                    "from_state": self._fsm.current_state.name,
                    "to_state": target.name,
                    "trigger": trigger,
                    "reason": result.error_reason,
                },
            )
            return False

        # Token existe se e somente se AWAITING_SCAN
        self._pairing_token = token if target == ConnectionState.AWAITING_SCAN else None
        logger.info("connection_state_changed", extra=result.transition.to_log_dict())
        return True

    def _force_state(self, target: ConnectionState, trigger: str) -> None:
        transition = self._fsm.reset(target, trigger=trigger)
        self._pairing_token = None
        if transition is not None:
            logger.info("connection_state_changed", extra=transition.to_log_dict())

    def _enter_error(self, trigger: str, exc: Exception) -> None:
        self._last_error = f"{type(exc).__name__}: {exc}"
        logger.error(
            "connection_failed",
            extra={
                "session_name": self._session_name,
                "trigger": trigger,
                "error_type": type(exc).__name__,
            },
            exc_info=exc,
        )
        self._transition(
            ConnectionState.ERROR,
            trigger,
            metadata={"error_type": type(exc).__name__},
        )

    def _notify(self, event: str, data: dict[str, Any]) -> None:
        if self._notifier is not None:
            self._notifier.notify(event, data)
