"""correlation_id por requisição HTTP, injetado nos logs.

ContextVar garante isolamento entre requisições concorrentes. Tasks
criadas durante a requisição (ex: entrega de webhook) herdam o valor
vigente no momento da criação.

Uso:
    with correlation_scope(request.headers.get(CORRELATION_ID_HEADER)) as cid:
        ...
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token

CORRELATION_ID_HEADER = "x-correlation-id"

# Tamanho máximo aceito do header (evita log poisoning)
MAX_CORRELATION_ID_LENGTH = 128

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """correlation_id do contexto atual ("" fora de requisição)."""
    return _correlation_id.get()


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id; valores ausentes ou inválidos geram um novo."""
    value = (correlation_id or "").strip()
    if not value or len(value) > MAX_CORRELATION_ID_LENGTH or not value.isprintable():
        value = generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Escopo com correlation_id definido; restaura o anterior na saída."""
    token = set_correlation_id(correlation_id)
    try:
        yield _correlation_id.get()
    finally:
        reset_correlation_id(token)
