"""Settings do webhook de saída (notificação de eventos)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class WebhookSettings:
    """Configurações do webhook de saída.

    Attributes:
        enabled: Liga/desliga o envio de eventos
        url: Destino do POST JSON
        timeout_seconds: Timeout por entrega (sem retry)
    """

    enabled: bool = False
    url: str = ""
    timeout_seconds: float = 10.0

    @property
    def is_active(self) -> bool:
        """Entrega só acontece com flag ligada e URL configurada."""
        return self.enabled and bool(self.url)

    def validate(self) -> list[str]:
        errors: list[str] = []

        if self.enabled and not self.url:
            errors.append("WEBHOOK_URL obrigatório com WEBHOOK_ENABLED=true")

        if self.url and not self.url.startswith(("http://", "https://")):
            errors.append("WEBHOOK_URL deve começar com http:// ou https://")

        if self.timeout_seconds <= 0:
            errors.append("WEBHOOK_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_webhook_from_env() -> WebhookSettings:
    return WebhookSettings(
        enabled=os.getenv("WEBHOOK_ENABLED", "").lower() == "true",
        url=os.getenv("WEBHOOK_URL", ""),
        timeout_seconds=float(os.getenv("WEBHOOK_TIMEOUT_SECONDS", "10")),
    )


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    """Retorna instância cacheada de WebhookSettings."""
    return _load_webhook_from_env()
