"""Registros normalizados de contatos e grupos.

O transporte devolve dicionários com campos opcionais e nomes variados;
a validação acontece uma única vez aqui, na fronteira, e o resto do
sistema trabalha apenas com os modelos.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_CONTACT_NAME = "Unknown"


class ContactRecord(BaseModel):
    """Contato conhecido pela sessão."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Endereço do contato (jid)")
    name: str = UNKNOWN_CONTACT_NAME
    number: str = Field(..., description="Parte de usuário do endereço")

    @classmethod
    def from_transport(cls, raw: dict[str, Any]) -> ContactRecord:
        """Constrói a partir do dicionário do transporte.

        Nome: name → notify → verified_name (ou verifiedName) → "Unknown".

        Raises:
            pydantic.ValidationError: Se não houver id utilizável.
        """
        contact_id = str(raw.get("id") or "")
        name = (
            raw.get("name")
            or raw.get("notify")
            or raw.get("verified_name")
            or raw.get("verifiedName")
            or UNKNOWN_CONTACT_NAME
        )
        return cls.model_validate(
            {"id": contact_id, "name": name, "number": contact_id.split("@", 1)[0]}
        )


class GroupRecord(BaseModel):
    """Grupo do qual a sessão participa."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    participants: int = Field(default=0, ge=0)
    owner: str | None = None

    @field_validator("participants", mode="before")
    @classmethod
    def _count_participants(cls, value: Any) -> Any:
        # O transporte manda a lista de participantes; guardamos a contagem
        if value is None:
            return 0
        if isinstance(value, (list, tuple, set)):
            return len(value)
        return value

    @classmethod
    def from_transport(cls, raw: dict[str, Any]) -> GroupRecord:
        """Constrói a partir do dicionário do transporte (subject → name)."""
        return cls.model_validate(
            {
                "id": raw.get("id") or "",
                "name": raw.get("subject") or raw.get("name") or "",
                "participants": raw.get("participants"),
                "owner": raw.get("owner"),
            }
        )
