"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings
e monta o container de serviços do WhatsApp.

Uso:
    from app.bootstrap import initialize_app, build_whatsapp_services

    # Na inicialização do serviço
    initialize_app()
    services = build_whatsapp_services()
    await services.start()
"""

from __future__ import annotations

import logging

from app.bootstrap.container import WhatsAppServices, build_whatsapp_services
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_api_settings,
    get_base_settings,
    get_credential_store_settings,
    get_webhook_settings,
    get_whatsapp_settings,
)

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)

__all__ = [
    "WhatsAppServices",
    "build_whatsapp_services",
    "initialize_app",
    "validate_runtime_settings",
]


def initialize_app() -> None:
    """Configura logging estruturado JSON com correlation_id.

    Deve ser chamada uma vez no início do serviço.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    environment = base.environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"whatsapp: {error}" for error in get_whatsapp_settings().validate())
    errors.extend(
        f"credentials: {error}" for error in get_credential_store_settings().validate(base)
    )
    errors.extend(f"webhook: {error}" for error in get_webhook_settings().validate())
    errors.extend(f"api: {error}" for error in get_api_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")
