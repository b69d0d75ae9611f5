"""Formatter JSON dos logs estruturados.

Campos presentes em todo log:
- timestamp (asctime)
- level (levelname)
- logger (name)
- message
- correlation_id
- service

Logs nunca carregam número de telefone completo nem corpo de mensagem.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Ordem fixa para facilitar leitura no console
REQUIRED_LOG_FIELDS: tuple[str, ...] = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "asctime": "timestamp",
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "timestamp": "2026-10-18T10:30:00",
            "level": "INFO",
            "logger": "app.services.connection_manager",
            "message": "connection_state_changed",
            "correlation_id": "",
            "service": "whatsapp_sender",
            "to_state": "CONNECTED"
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )
