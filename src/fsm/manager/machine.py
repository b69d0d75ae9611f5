"""
Máquina de estados da conexão (ConnectionStateMachine).

Controla o estado atual, valida transições contra o mapa e os guards
e mantém histórico rastreável para observabilidade.
"""

from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.connection import (
    DEFAULT_INITIAL_STATE,
    ConnectionState,
    is_terminal,
)
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

# Limite do histórico em memória (conexões longas geram muitas quedas)
DEFAULT_HISTORY_LIMIT = 100


class ConnectionStateMachine:
    """
    Máquina de estados de uma sessão do WhatsApp.

    Não é thread-safe: o ConnectionManager é o único escritor e
    serializa as chamadas no event loop.

    Attributes:
        current_state: Estado atual da máquina
        history: Histórico de transições realizadas
    """

    __slots__ = ("_current_state", "_history", "_history_limit", "_session_name")

    def __init__(
        self,
        initial_state: ConnectionState | None = None,
        session_name: str = "",
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        """
        Inicializa a máquina de estados.

        Args:
            initial_state: Estado inicial (usa DEFAULT_INITIAL_STATE se None)
            session_name: Nome da sessão para logs
            history_limit: Máximo de transições mantidas no histórico
        """
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: list[StateTransition] = []
        self._history_limit = history_limit
        self._session_name = session_name

    @property
    def current_state(self) -> ConnectionState:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def session_name(self) -> str:
        return self._session_name

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._current_state)

    def can_transition_to(self, target: ConnectionState) -> bool:
        """Verifica se pode transitar para o estado alvo."""
        if not is_transition_valid(self._current_state, target):
            return False
        return evaluate_guards(self._current_state, target).allowed

    def get_valid_targets(self) -> frozenset[ConnectionState]:
        """Retorna estados de destino válidos a partir do estado atual."""
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: ConnectionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Nunca levanta exceção para transição inválida: o resultado
        informa o motivo e o estado permanece inalterado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho (ex: 'transport_opened')
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        guard_result: GuardResult = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )

        self._current_state = target
        self._history.append(transition)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit:]

        return TransitionResult(success=True, transition=transition)

    def reset(
        self,
        new_initial_state: ConnectionState | None = None,
        trigger: str = "reset",
    ) -> StateTransition | None:
        """
        Força o estado, ignorando mapa e guards.

        Usado apenas por operações explícitas do operador (initialize
        saindo de ERROR, logout, shutdown). O salto fica registrado no
        histórico para auditoria.

        Args:
            new_initial_state: Novo estado (usa default se None)
            trigger: Gatilho registrado no histórico

        Returns:
            Transição registrada, ou None se o estado já era o alvo
        """
        target = new_initial_state or DEFAULT_INITIAL_STATE
        if target == self._current_state:
            return None

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata={"forced": True},
        )
        self._current_state = target
        self._history.append(transition)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit:]
        return transition


def create_state_machine(
    session_name: str,
    initial_state: ConnectionState | None = None,
) -> ConnectionStateMachine:
    """
    Factory para criar a máquina de estados de uma sessão.

    Args:
        session_name: Nome da sessão
        initial_state: Estado inicial (opcional)

    Returns:
        ConnectionStateMachine configurada
    """
    return ConnectionStateMachine(
        initial_state=initial_state,
        session_name=session_name,
    )
