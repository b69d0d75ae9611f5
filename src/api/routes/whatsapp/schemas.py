"""Modelos de request da API de envio.

Mídia chega em JSON como base64 (Base64Bytes decodifica na validação).
Nomes de campo seguem o contrato público da API (camelCase).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.types import Base64Bytes

from app.services.message_dispatcher import DEFAULT_DOCUMENT_MIMETYPE


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class SendMessageRequest(_RequestModel):
    number: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class SendImageRequest(_RequestModel):
    number: str = Field(..., min_length=1)
    image: Base64Bytes
    caption: str = ""

    @field_validator("image")
    @classmethod
    def _not_empty(cls, value: bytes) -> bytes:
        if not value:
            raise ValueError("image vazia")
        return value


class SendDocumentRequest(_RequestModel):
    number: str = Field(..., min_length=1)
    document: Base64Bytes
    file_name: str = Field(..., min_length=1, alias="fileName")
    mimetype: str = DEFAULT_DOCUMENT_MIMETYPE

    @field_validator("document")
    @classmethod
    def _not_empty(cls, value: bytes) -> bytes:
        if not value:
            raise ValueError("document vazio")
        return value


class SendBulkRequest(_RequestModel):
    numbers: list[str] = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    delay: int | None = Field(default=None, ge=0, description="Pausa entre envios (ms)")

    @property
    def delay_seconds(self) -> float | None:
        return None if self.delay is None else self.delay / 1000


class SendGroupMessageRequest(_RequestModel):
    group_id: str = Field(..., min_length=1, alias="groupId")
    message: str = Field(..., min_length=1)
