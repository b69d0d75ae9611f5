"""Envio de mensagens e consultas de contatos/grupos.

Toda operação exige estado CONNECTED e falha com NotConnectedError
antes de tocar o transporte. Não há retry: ou o transporte aceita o
envio, ou o erro dele sobe sem alteração.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from app.domain.records import ContactRecord, GroupRecord
from app.domain.results import SendResult
from app.services.addressing import is_group_address, normalize_target
from config.logging import mask_address
from utils.errors import InvalidTargetError

if TYPE_CHECKING:
    from app.services.connection_manager import ConnectionManager
    from app.services.webhook_notifier import WebhookNotifier

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_MIMETYPE = "application/octet-stream"


class MessageDispatcher:
    """Normaliza destinos e delega envios ao transporte conectado.

    Args:
        connection: Dono do transporte e do estado da conexão
        default_country_code: DDI aplicado a números nacionais (10 dígitos)
        notifier: Recebe "message_sent" após cada envio bem-sucedido
    """

    def __init__(
        self,
        connection: ConnectionManager,
        default_country_code: str,
        notifier: WebhookNotifier | None = None,
    ) -> None:
        self._connection = connection
        self._default_country_code = default_country_code
        self._notifier = notifier

    def normalize(self, target: str) -> str:
        return normalize_target(target, self._default_country_code)

    def ensure_connected(self) -> None:
        """Levanta NotConnectedError fora de CONNECTED."""
        self._connection.require_connected()

    async def send_text(self, target: str, body: str) -> SendResult:
        await self._send(target, {"text": body}, kind="text")
        return SendResult(success=True, message="Mensagem enviada com sucesso")

    async def send_image(
        self,
        target: str,
        image: bytes,
        caption: str = "",
    ) -> SendResult:
        await self._send(target, {"image": image, "caption": caption}, kind="image")
        return SendResult(success=True, message="Imagem enviada com sucesso")

    async def send_document(
        self,
        target: str,
        document: bytes,
        file_name: str,
        mime_type: str = DEFAULT_DOCUMENT_MIMETYPE,
    ) -> SendResult:
        payload = {
            "document": document,
            "file_name": file_name,
            "mimetype": mime_type or DEFAULT_DOCUMENT_MIMETYPE,
        }
        await self._send(target, payload, kind="document")
        return SendResult(success=True, message="Documento enviado com sucesso")

    async def send_group_message(self, group_id: str, body: str) -> SendResult:
        """Envia texto para grupo; o id precisa ser um endereço de grupo."""
        if not is_group_address(group_id):
            raise InvalidTargetError(f"Grupo inválido: {group_id!r}")
        await self._send(group_id, {"text": body}, kind="group_text")
        return SendResult(success=True, message="Mensagem enviada para o grupo com sucesso")

    async def get_contacts(self) -> list[ContactRecord]:
        transport = self._connection.require_connected()
        raw_contacts = await transport.fetch_contacts()
        return _parse_records(raw_contacts, ContactRecord.from_transport, "contact")

    async def get_groups(self) -> list[GroupRecord]:
        transport = self._connection.require_connected()
        raw_groups = await transport.fetch_groups()
        return _parse_records(raw_groups, GroupRecord.from_transport, "group")

    async def _send(self, target: str, payload: dict[str, Any], *, kind: str) -> None:
        transport = self._connection.require_connected()
        address = self.normalize(target)

        await transport.send(address, payload)

        logger.info(
            "message_sent",
            extra={"kind": kind, "address": mask_address(address)},
        )
        if self._notifier is not None:
            self._notifier.notify("message_sent", {"to": address, "type": kind})


def _parse_records(raw_items: list[dict[str, Any]] | None, parser: Any, kind: str) -> list[Any]:
    records = []
    for raw in raw_items or []:
        try:
            records.append(parser(raw))
        except (ValidationError, AttributeError, TypeError) as exc:
            logger.warning(
                "transport_record_skipped",
                extra={"kind": kind, "error_type": type(exc).__name__},
            )
    return records
