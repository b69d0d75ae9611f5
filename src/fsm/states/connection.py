"""
Estados canônicos da conexão com o WhatsApp.

Este módulo define os estados que a conexão de uma sessão pode assumir
durante seu ciclo de vida. Exatamente um estado vale a cada instante e
apenas o ConnectionManager escreve nele.
"""

from enum import StrEnum


class ConnectionState(StrEnum):
    """
    Estados canônicos da conexão.

    Os valores são os mesmos expostos pela API (clientes existentes
    dependem de "qr" para saber que há token de pareamento).

    Estados não-terminais:
        - DISCONNECTED: Sem transporte ativo (inicial, após queda ou logout)
        - AWAITING_SCAN: Transporte emitiu token de pareamento (QR)
        - CONNECTED: Sessão aberta, envios liberados

    Estados terminais:
        - ERROR: Falha irrecuperável na inicialização; exige initialize()
    """

    DISCONNECTED = "disconnected"
    AWAITING_SCAN = "qr"
    CONNECTED = "connected"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


# Uma vez em ERROR, só reset explícito (initialize) tira a máquina do estado
TERMINAL_STATES: frozenset[ConnectionState] = frozenset({
    ConnectionState.ERROR,
})

DEFAULT_INITIAL_STATE: ConnectionState = ConnectionState.DISCONNECTED


def is_terminal(state: ConnectionState) -> bool:
    """Verifica se o estado é terminal."""
    return state in TERMINAL_STATES


def is_valid_state(state: ConnectionState) -> bool:
    """
    Verifica se o valor é um estado válido do enum.

    Args:
        state: Estado a ser verificado

    Returns:
        True se é um ConnectionState válido
    """
    return isinstance(state, ConnectionState)
