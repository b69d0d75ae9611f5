"""Agregador de settings do serviço de envio WhatsApp.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

from config.settings.api import ApiSettings, get_api_settings
from config.settings.base import (
    BaseSettings,
    CredentialStoreBackend,
    CredentialStoreSettings,
    Environment,
    get_base_settings,
    get_credential_store_settings,
)
from config.settings.webhook import WebhookSettings, get_webhook_settings
from config.settings.whatsapp import (
    GROUP_ADDRESS_SUFFIX,
    USER_ADDRESS_SUFFIX,
    WhatsAppSettings,
    get_whatsapp_settings,
)

__all__ = [
    "GROUP_ADDRESS_SUFFIX",
    "USER_ADDRESS_SUFFIX",
    "ApiSettings",
    "BaseSettings",
    "CredentialStoreBackend",
    "CredentialStoreSettings",
    "Environment",
    "WebhookSettings",
    "WhatsAppSettings",
    "get_api_settings",
    "get_base_settings",
    "get_credential_store_settings",
    "get_webhook_settings",
    "get_whatsapp_settings",
]
