"""Settings específicas da sessão WhatsApp (multi-device).

Configura nome da sessão, endereçamento dos destinos, política de
reconexão, ritmo do envio em massa e o transporte de protocolo.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Sufixos de endereço do protocolo
USER_ADDRESS_SUFFIX: str = "@s.whatsapp.net"
GROUP_ADDRESS_SUFFIX: str = "@g.us"


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações da sessão WhatsApp.

    Attributes:
        session_name: Chave das credenciais no store
        default_country_code: DDI prefixado em números de 10 dígitos
        reconnect_backoff_seconds: Espera antes da reconexão após queda
        bulk_default_delay_ms: Pausa padrão entre envios em massa
        bulk_max_targets: Máximo de destinos por envio em massa
        transport_factory: Caminho "modulo:callable" da factory do transporte
    """

    session_name: str = "whatsapp-session"
    default_country_code: str = "1"
    reconnect_backoff_seconds: float = 3.0
    bulk_default_delay_ms: int = 2000
    bulk_max_targets: int = 500
    transport_factory: str = ""

    @property
    def bulk_default_delay_seconds(self) -> float:
        return self.bulk_default_delay_ms / 1000

    def validate(self) -> list[str]:
        """Valida configurações mínimas de WhatsApp.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.session_name or "/" in self.session_name:
            errors.append("WHATSAPP_SESSION_NAME vazio ou com '/'")

        if not self.default_country_code.isdigit():
            errors.append("WHATSAPP_DEFAULT_COUNTRY_CODE deve conter apenas dígitos")

        if self.reconnect_backoff_seconds < 0:
            errors.append("WHATSAPP_RECONNECT_BACKOFF_SECONDS deve ser >= 0")

        if self.bulk_default_delay_ms < 0:
            errors.append("WHATSAPP_BULK_DEFAULT_DELAY_MS deve ser >= 0")

        if self.bulk_max_targets < 1:
            errors.append("WHATSAPP_BULK_MAX_TARGETS deve ser >= 1")

        if not self.transport_factory:
            errors.append("WHATSAPP_TRANSPORT_FACTORY não configurado")
        elif ":" not in self.transport_factory:
            errors.append("WHATSAPP_TRANSPORT_FACTORY deve ter formato 'modulo:callable'")

        return errors


def _load_from_env() -> WhatsAppSettings:
    """Carrega WhatsAppSettings a partir de variáveis de ambiente."""
    return WhatsAppSettings(
        session_name=os.getenv(
            "WHATSAPP_SESSION_NAME", os.getenv("SESSION_NAME", "whatsapp-session")
        ),
        default_country_code=os.getenv("WHATSAPP_DEFAULT_COUNTRY_CODE", "1"),
        reconnect_backoff_seconds=float(
            os.getenv("WHATSAPP_RECONNECT_BACKOFF_SECONDS", "3")
        ),
        bulk_default_delay_ms=int(os.getenv("WHATSAPP_BULK_DEFAULT_DELAY_MS", "2000")),
        bulk_max_targets=int(os.getenv("WHATSAPP_BULK_MAX_TARGETS", "500")),
        transport_factory=os.getenv("WHATSAPP_TRANSPORT_FACTORY", ""),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
