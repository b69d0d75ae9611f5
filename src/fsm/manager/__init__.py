"""
Exports públicos do módulo fsm/manager.

Máquina de estados (ConnectionStateMachine) da conexão.
"""

from fsm.manager.machine import (
    DEFAULT_HISTORY_LIMIT,
    ConnectionStateMachine,
    create_state_machine,
)

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "ConnectionStateMachine",
    "create_state_machine",
]
