"""Normalização de destinos para endereços do protocolo."""

from __future__ import annotations

import re

from config.settings.whatsapp import GROUP_ADDRESS_SUFFIX, USER_ADDRESS_SUFFIX
from utils.errors import InvalidTargetError

_NON_DIGITS = re.compile(r"\D")

# Número nacional sem DDI (ex: NANP "5551234567")
NATIONAL_NUMBER_LENGTH = 10


def is_group_address(target: str) -> bool:
    """Grupos já chegam qualificados (…@g.us)."""
    return target.strip().endswith(GROUP_ADDRESS_SUFFIX)


def normalize_target(
    target: str,
    default_country_code: str,
    address_suffix: str = USER_ADDRESS_SUFFIX,
) -> str:
    """Converte número cru ou endereço de grupo em endereço do protocolo.

    - Grupo: devolvido sem alteração.
    - Número: remove tudo que não é dígito; com exatamente 10 dígitos
      recebe o DDI padrão; recebe o sufixo de endereço.

    Exemplo:
        normalize_target("(555) 123-4567", "1") -> "15551234567@s.whatsapp.net"

    Raises:
        InvalidTargetError: Se não sobrar nenhum dígito.
    """
    if is_group_address(target):
        return target.strip()

    digits = _NON_DIGITS.sub("", target.split("@", 1)[0])
    if not digits:
        raise InvalidTargetError(f"Destino inválido: {target!r}")

    if len(digits) == NATIONAL_NUMBER_LENGTH:
        digits = f"{default_country_code}{digits}"

    return f"{digits}{address_suffix}"
