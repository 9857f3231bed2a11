"""FSM IVR: Estados, eventos e transições.

Exporta:
- IvrState: 14 estados canônicos
- IvrEvent: 15 eventos
- Transition / TRANSITIONS: tabela declarativa
- validate_transition / validate_transition_table: validadores puros
"""

from bank_ivr.domain.session.events import OUTCOME_EVENTS, IvrEvent
from bank_ivr.domain.session.states import (
    INITIAL_STATE,
    RELAY_STATES,
    RESTING_STATES,
    TERMINAL_STATES,
    IvrState,
)
from bank_ivr.domain.session.transitions import (
    AUTO_ADVANCE,
    TRANSITIONS,
    ActionId,
    Transition,
    get_transition,
    validate_transition,
    validate_transition_table,
)

__all__ = [
    "IvrState",
    "IvrEvent",
    "ActionId",
    "Transition",
    "TRANSITIONS",
    "AUTO_ADVANCE",
    "INITIAL_STATE",
    "TERMINAL_STATES",
    "RELAY_STATES",
    "RESTING_STATES",
    "OUTCOME_EVENTS",
    "get_transition",
    "validate_transition",
    "validate_transition_table",
]
