"""Endpoints da sessão WhatsApp (status, QR, envios, consultas, logout).

Todos exigem API key quando ENABLE_API_KEY=true. Erros do núcleo são
convertidos no envelope padrão por api.errors:
- NotConnectedError → 503
- InvalidTargetError / validação → 400
- demais → 500
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_services
from api.errors import error_response, success
from api.routes.whatsapp.schemas import (
    SendBulkRequest,
    SendDocumentRequest,
    SendGroupMessageRequest,
    SendImageRequest,
    SendMessageRequest,
)
from app.bootstrap import WhatsAppServices

router = APIRouter()


@router.get("/status")
async def get_status(services: WhatsAppServices = Depends(get_services)) -> dict[str, Any]:
    return success(services.connection.get_state().to_dict())


@router.get("/qr", response_model=None)
async def get_qr(
    services: WhatsAppServices = Depends(get_services),
) -> dict[str, Any] | JSONResponse:
    """Token de pareamento; só existe aguardando leitura do QR."""
    token = services.connection.get_pairing_token()
    if token is None:
        return error_response(
            status.HTTP_404_NOT_FOUND,
            "QR code indisponível: já conectado ou não inicializado",
        )
    return success({"qr": token})


@router.post("/send-message")
async def send_message(
    body: SendMessageRequest,
    services: WhatsAppServices = Depends(get_services),
) -> dict[str, Any]:
    result = await services.dispatcher.send_text(body.number, body.message)
    return success(result.to_dict())


@router.post("/send-image")
async def send_image(
    body: SendImageRequest,
    services: WhatsAppServices = Depends(get_services),
) -> dict[str, Any]:
    result = await services.dispatcher.send_image(body.number, body.image, body.caption)
    return success(result.to_dict())


@router.post("/send-document")
async def send_document(
    body: SendDocumentRequest,
    services: WhatsAppServices = Depends(get_services),
) -> dict[str, Any]:
    result = await services.dispatcher.send_document(
        body.number,
        body.document,
        body.file_name,
        body.mimetype,
    )
    return success(result.to_dict())


@router.post("/send-bulk", response_model=None)
async def send_bulk(
    body: SendBulkRequest,
    services: WhatsAppServices = Depends(get_services),
) -> dict[str, Any] | JSONResponse:
    """Envio em massa; lote acima de WHATSAPP_BULK_MAX_TARGETS é 400."""
    try:
        report = await services.bulk.send_bulk(body.numbers, body.message, body.delay_seconds)
    except ValueError as exc:
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    return success(report.to_dict())


@router.get("/contacts")
async def get_contacts(services: WhatsAppServices = Depends(get_services)) -> dict[str, Any]:
    contacts = await services.dispatcher.get_contacts()
    return success([contact.model_dump() for contact in contacts])


@router.get("/groups")
async def get_groups(services: WhatsAppServices = Depends(get_services)) -> dict[str, Any]:
    groups = await services.dispatcher.get_groups()
    return success([group.model_dump() for group in groups])


@router.post("/send-group-message")
async def send_group_message(
    body: SendGroupMessageRequest,
    services: WhatsAppServices = Depends(get_services),
) -> dict[str, Any]:
    result = await services.dispatcher.send_group_message(body.group_id, body.message)
    return success(result.to_dict())


@router.post("/logout")
async def logout(services: WhatsAppServices = Depends(get_services)) -> dict[str, Any]:
    ack = await services.connection.logout()
    return success(ack.to_dict())
