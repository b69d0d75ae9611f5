"""Envio em massa sequencial com pausa entre mensagens.

Um destino por vez, na ordem recebida. Falha em um destino vira item
do relatório e o lote continua.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING

from app.domain.results import BulkItemResult, BulkReport

if TYPE_CHECKING:
    from app.services.message_dispatcher import MessageDispatcher

logger = logging.getLogger(__name__)

DEFAULT_BULK_DELAY_SECONDS = 2.0

SleepFn = Callable[[float], Awaitable[None]]


class BulkDispatcher:
    """Orquestra send_text para uma lista de destinos.

    Args:
        dispatcher: MessageDispatcher usado para cada envio
        default_delay_seconds: Pausa padrão entre envios
        max_targets: Limite de destinos por lote (None = sem limite)
        sleep: Função de espera (injetável em testes)
    """

    def __init__(
        self,
        dispatcher: MessageDispatcher,
        default_delay_seconds: float = DEFAULT_BULK_DELAY_SECONDS,
        *,
        max_targets: int | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if default_delay_seconds < 0:
            raise ValueError("default_delay_seconds não pode ser negativo")
        self._dispatcher = dispatcher
        self._default_delay = default_delay_seconds
        self._max_targets = max_targets
        self._sleep = sleep

    @property
    def default_delay_seconds(self) -> float:
        return self._default_delay

    async def send_bulk(
        self,
        targets: Sequence[str],
        body: str,
        delay_seconds: float | None = None,
    ) -> BulkReport:
        """Envia `body` para cada destino, pausando entre os envios.

        Args:
            targets: Destinos na ordem de envio
            body: Texto da mensagem
            delay_seconds: Pausa entre envios (None = padrão configurado)

        Returns:
            BulkReport com um item por destino, na mesma ordem.

        Raises:
            NotConnectedError: Se não estiver conectado no início do lote.
            ValueError: Pausa negativa ou lote acima do limite.
        """
        delay = self._default_delay if delay_seconds is None else delay_seconds
        if delay < 0:
            raise ValueError("delay_seconds não pode ser negativo")
        if self._max_targets is not None and len(targets) > self._max_targets:
            raise ValueError(f"Máximo de {self._max_targets} destinos por lote")

        self._dispatcher.ensure_connected()

        logger.info("bulk_send_started", extra={"total": len(targets), "delay_seconds": delay})
        results: list[BulkItemResult] = []
        for index, target in enumerate(targets):
            if index > 0 and delay > 0:
                await self._sleep(delay)
            try:
                await self._dispatcher.send_text(target, body)
            except Exception as exc:
                results.append(BulkItemResult(target=target, success=False, error=str(exc)))
                logger.warning(
                    "bulk_item_failed",
                    extra={"index": index, "error_type": type(exc).__name__},
                )
                continue
            results.append(BulkItemResult(target=target, success=True))

        report = BulkReport(results=tuple(results))
        logger.info(
            "bulk_send_finished",
            extra={"total": report.total, "succeeded": report.succeeded, "failed": report.failed},
        )
        return report
