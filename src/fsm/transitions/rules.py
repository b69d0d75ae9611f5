"""
Regras de transição válidas entre estados da conexão.

Este módulo define o grafo de transições da máquina de estados
da conexão. Qualquer mudança de estado fora deste mapa é rejeitada.
"""

from fsm.states.connection import TERMINAL_STATES, ConnectionState

TransitionMap = dict[ConnectionState, frozenset[ConnectionState]]

# Chave: estado de origem
# Valor: conjunto de estados de destino permitidos
VALID_TRANSITIONS: TransitionMap = {
    # DISCONNECTED: transporte iniciado emite QR, abre direto ou falha
    ConnectionState.DISCONNECTED: frozenset({
        ConnectionState.AWAITING_SCAN,
        ConnectionState.CONNECTED,
        ConnectionState.ERROR,
    }),

    # AWAITING_SCAN: novo QR, leitura confirmada, queda ou falha
    ConnectionState.AWAITING_SCAN: frozenset({
        ConnectionState.AWAITING_SCAN,  # Token regenerado pelo transporte
        ConnectionState.CONNECTED,
        ConnectionState.DISCONNECTED,
        ConnectionState.ERROR,
    }),

    # CONNECTED: queda (com ou sem logout remoto) ou falha de persistência
    ConnectionState.CONNECTED: frozenset({
        ConnectionState.DISCONNECTED,
        ConnectionState.ERROR,
    }),

    # Terminal
    ConnectionState.ERROR: frozenset(),
}


def get_valid_targets(state: ConnectionState) -> frozenset[ConnectionState]:
    """
    Retorna os estados de destino válidos para um estado de origem.

    Args:
        state: Estado de origem

    Returns:
        Conjunto de estados de destino permitidos (vazio se terminal)
    """
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: ConnectionState, to_state: ConnectionState) -> bool:
    """Verifica se uma transição é válida segundo o mapa."""
    if from_state in TERMINAL_STATES:
        return False

    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Estados terminais têm conjunto vazio
    - Nenhuma transição aponta para estado inexistente

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in ConnectionState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        targets = VALID_TRANSITIONS.get(state, frozenset())
        if targets:
            errors.append(
                f"Estado terminal {state.name} não deveria ter transições: {targets}"
            )

    for from_state, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, ConnectionState):
                errors.append(
                    f"Transição {from_state.name} → {target}: destino inválido"
                )

    return errors
