"""Settings da superfície HTTP (FastAPI)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass(frozen=True)
class ApiSettings:
    """Configurações da API HTTP.

    Attributes:
        api_key_enabled: Exige x-api-key (ou ?api_key=) em /api
        api_key: Chave esperada
        allowed_origins: Origens liberadas no CORS
        host: Interface de bind do uvicorn
        port: Porta do uvicorn
    """

    api_key_enabled: bool = False
    api_key: str = ""
    allowed_origins: tuple[str, ...] = field(default=("*",))
    host: str = "0.0.0.0"
    port: int = 3000

    def validate(self) -> list[str]:
        errors: list[str] = []

        if self.api_key_enabled and not self.api_key:
            errors.append("API_KEY obrigatório com ENABLE_API_KEY=true")

        if not 0 < self.port < 65536:
            errors.append(f"PORT inválida: {self.port}")

        return errors


def _parse_origins(raw: str) -> tuple[str, ...]:
    origins = tuple(origin.strip() for origin in raw.split(",") if origin.strip())
    return origins or ("*",)


def _load_api_from_env() -> ApiSettings:
    return ApiSettings(
        api_key_enabled=os.getenv("ENABLE_API_KEY", "").lower() == "true",
        api_key=os.getenv("API_KEY", ""),
        allowed_origins=_parse_origins(os.getenv("ALLOWED_ORIGINS", "*")),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
    )


@lru_cache(maxsize=1)
def get_api_settings() -> ApiSettings:
    """Retorna instância cacheada de ApiSettings."""
    return _load_api_from_env()
