"""Notificação de eventos para webhook externo (best-effort).

Cada notificação vira uma task assíncrona independente: quem dispara
(conexão, envio) nunca espera a entrega. Falhas são logadas e
descartadas, sem retry.

Payload enviado:
    {"event": "<nome>", "data": {...}, "timestamp": <epoch ms>}
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from utils.errors import WebhookError

if TYPE_CHECKING:
    from config.settings import WebhookSettings

logger = logging.getLogger(__name__)


class WebhookNotifier:
    """Dispara eventos para o webhook configurado.

    Args:
        settings: WebhookSettings (enabled/url/timeout)
        http_client: Cliente httpx opcional (testes injetam MockTransport).
            Se None, o notifier cria e fecha o próprio cliente.
    """

    def __init__(
        self,
        settings: WebhookSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._client = http_client
        self._owns_client = http_client is None
        self._active_tasks: set[asyncio.Task[None]] = set()

    @property
    def enabled(self) -> bool:
        return self._settings.is_active

    @property
    def pending(self) -> int:
        return len(self._active_tasks)

    def notify(self, event: str, data: dict[str, Any]) -> asyncio.Task[None] | None:
        """Agenda a entrega do evento e retorna imediatamente.

        Args:
            event: Nome do evento (ex: "connected", "message")
            data: Dados serializáveis em JSON

        Returns:
            Task da entrega, ou None se o webhook está desligado.
        """
        if not self.enabled:
            return None

        payload = {
            "event": event,
            "data": data,
            "timestamp": int(time.time() * 1000),
        }
        task = asyncio.create_task(self._deliver(payload))
        self._active_tasks.add(task)
        task.add_done_callback(self._on_delivery_done)
        return task

    async def _deliver(self, payload: dict[str, Any]) -> None:
        try:
            await self._post(payload)
        except WebhookError as exc:
            logger.warning(
                "webhook_delivery_failed",
                extra={
                    "event": payload["event"],
                    "status_code": exc.status_code,
                    "error": str(exc),
                },
            )
            return
        logger.debug("webhook_delivered", extra={"event": payload["event"]})

    async def _post(self, payload: dict[str, Any]) -> None:
        client = self._get_client()
        try:
            response = await client.post(
                self._settings.url,
                json=payload,
                timeout=self._settings.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise WebhookError(f"webhook_connection_error: {type(exc).__name__}") from exc

        if response.is_error:
            raise WebhookError("webhook_http_error", status_code=response.status_code)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout_seconds)
        return self._client

    def _on_delivery_done(self, task: asyncio.Task[None]) -> None:
        self._active_tasks.discard(task)
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "webhook_task_failed",
                    extra={"error_type": type(exc).__name__},
                )

    async def drain(self, timeout_seconds: float = 10.0) -> None:
        """Aguarda entregas pendentes no shutdown; cancela as que estourarem."""
        if not self._active_tasks:
            return

        pending_now = list(self._active_tasks)
        logger.info(
            "webhook_shutdown_wait",
            extra={"pending_tasks": len(pending_now), "timeout_seconds": timeout_seconds},
        )
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        if not pending:
            return

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning("webhook_shutdown_cancelled", extra={"cancelled_tasks": len(pending)})

    async def aclose(self) -> None:
        """Fecha o cliente HTTP se foi criado pelo notifier."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
