"""Tabela de transições do FSM IVR.

- TRANSITIONS[(source, event)] = Transition(source, event, target, action)
- No máximo uma transição por par (source, event): dispatch determinístico
- END_CALL não aparece como origem (sem transições de saída)
- Tabela é imutável; carregada uma vez no import
- Validação pura: sem side effects
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from bank_ivr.domain.errors import TransitionTableError
from bank_ivr.domain.session.events import OUTCOME_EVENTS, IvrEvent
from bank_ivr.domain.session.states import (
    INITIAL_STATE,
    RELAY_STATES,
    TERMINAL_STATES,
    IvrState,
)


class ActionId(StrEnum):
    """Ações anexáveis a uma transição."""

    VALIDATE_SSN = "validate_ssn"
    STORE_CARD_NUMBER = "store_card_number"
    VALIDATE_PIN_AND_CARD = "validate_pin_and_card"


ACTION_OUTCOMES: Mapping[ActionId, frozenset[IvrEvent]] = MappingProxyType(
    {
        ActionId.VALIDATE_SSN: OUTCOME_EVENTS,
        ActionId.STORE_CARD_NUMBER: frozenset(),
        ActionId.VALIDATE_PIN_AND_CARD: OUTCOME_EVENTS,
    }
)
"""Eventos de desfecho que cada ação pode produzir."""


@dataclass(frozen=True, slots=True)
class Transition:
    """Entrada imutável da tabela."""

    source: IvrState
    event: IvrEvent
    target: IvrState
    action: ActionId | None = None


def _build(entries: Iterable[Transition]) -> Mapping[tuple[IvrState, IvrEvent], Transition]:
    table: dict[tuple[IvrState, IvrEvent], Transition] = {}
    for entry in entries:
        key = (entry.source, entry.event)
        if key in table:
            raise TransitionTableError(
                f"Duplicate transition for {entry.source} on {entry.event}"
            )
        table[key] = entry
    return MappingProxyType(table)


_S = IvrState
_E = IvrEvent

TRANSITIONS: Mapping[tuple[IvrState, IvrEvent], Transition] = _build(
    [
        # === WELCOME → ... ===
        Transition(_S.WELCOME, _E.CALL_CONNECTED, _S.AUTHENTICATION_METHOD),
        # === Escolha do método ===
        Transition(_S.AUTHENTICATION_METHOD, _E.SELECT_SSN_AUTH, _S.SSN_PROMPT),
        Transition(_S.AUTHENTICATION_METHOD, _E.SELECT_CARD_AUTH, _S.CARD_NUMBER_PROMPT),
        # === Caminho SSN ===
        Transition(_S.SSN_PROMPT, _E.ENTER_SSN, _S.VALIDATING, ActionId.VALIDATE_SSN),
        # === Caminho cartão (validação só após o PIN) ===
        Transition(
            _S.CARD_NUMBER_PROMPT,
            _E.ENTER_CARD_NUMBER,
            _S.PIN_PROMPT,
            ActionId.STORE_CARD_NUMBER,
        ),
        Transition(_S.PIN_PROMPT, _E.ENTER_PIN, _S.VALIDATING, ActionId.VALIDATE_PIN_AND_CARD),
        # === Desfechos da validação ===
        Transition(_S.VALIDATING, _E.AUTHENTICATION_SUCCESS, _S.AUTHENTICATED),
        Transition(_S.VALIDATING, _E.AUTHENTICATION_FAILURE, _S.ERROR),
        Transition(_S.AUTHENTICATED, _E.AUTHENTICATION_SUCCESS, _S.MAIN_MENU),
        # === ERROR → ... ===
        Transition(_S.ERROR, _E.BACK, _S.AUTHENTICATION_METHOD),
        Transition(_S.ERROR, _E.END_CALL, _S.END_CALL),
        # === Menus pós-autenticação ===
        Transition(_S.MAIN_MENU, _E.SELECT_ACCOUNT_SERVICES, _S.ACCOUNT_SERVICES),
        Transition(_S.MAIN_MENU, _E.END_CALL, _S.END_CALL),
        Transition(_S.ACCOUNT_SERVICES, _E.SELECT_BALANCE_INQUIRY, _S.BALANCE_INQUIRY),
        Transition(_S.ACCOUNT_SERVICES, _E.SELECT_TRANSACTION_HISTORY, _S.TRANSACTION_HISTORY),
        Transition(_S.ACCOUNT_SERVICES, _E.SELECT_TRANSFER_FUNDS, _S.TRANSFER_FUNDS),
        Transition(_S.ACCOUNT_SERVICES, _E.BACK, _S.MAIN_MENU),
        # === Folhas de transação ===
        Transition(_S.BALANCE_INQUIRY, _E.COMPLETE_TRANSACTION, _S.MAIN_MENU),
        Transition(_S.TRANSACTION_HISTORY, _E.COMPLETE_TRANSACTION, _S.MAIN_MENU),
        Transition(_S.TRANSFER_FUNDS, _E.COMPLETE_TRANSACTION, _S.MAIN_MENU),
        # === END_CALL: terminal, sem transições de saída ===
    ]
)

AUTO_ADVANCE: Mapping[IvrState, IvrEvent] = MappingProxyType(
    {IvrState.AUTHENTICATED: IvrEvent.AUTHENTICATION_SUCCESS}
)
"""Estados que, ao serem alcançados, re-disparam um evento imediatamente."""


def get_transition(current_state: IvrState, event: IvrEvent) -> Transition | None:
    """Retorna a transição para (estado, evento) ou None."""
    return TRANSITIONS.get((current_state, event))


def validate_transition(
    current_state: IvrState, event: IvrEvent
) -> tuple[bool, IvrState | None, str]:
    """Valida se uma transição é permitida.

    Retorna:
    - (True, next_state, ""): transição válida
    - (False, None, motivo): transição inválida

    Nunca lança exceção; apenas valida.
    """
    if current_state in TERMINAL_STATES:
        return (
            False,
            None,
            f"Terminal state {current_state} has no transitions",
        )

    transition = get_transition(current_state, event)
    if transition is None:
        return (
            False,
            None,
            f"No transition from {current_state} on event {event}",
        )

    return True, transition.target, ""


def _reachable(
    table: Mapping[tuple[IvrState, IvrEvent], Transition], start: IvrState
) -> set[IvrState]:
    seen = {start}
    frontier = [start]
    while frontier:
        state = frontier.pop()
        for (source, _event), transition in table.items():
            if source == state and transition.target not in seen:
                seen.add(transition.target)
                frontier.append(transition.target)
    return seen


def validate_transition_table(
    table: Mapping[tuple[IvrState, IvrEvent], Transition] = TRANSITIONS,
    auto_advance: Mapping[IvrState, IvrEvent] = AUTO_ADVANCE,
) -> list[str]:
    """Valida consistência estrutural da tabela (executado no boot).

    Retorna lista de erros (vazia = tabela consistente).
    """
    errors: list[str] = []

    for (source, event), transition in table.items():
        if (transition.source, transition.event) != (source, event):
            errors.append(f"Entry key ({source}, {event}) does not match its transition")

    sources = {source for source, _ in table}

    if INITIAL_STATE not in sources:
        errors.append(f"Initial state {INITIAL_STATE} has no outgoing transitions")

    for terminal in TERMINAL_STATES:
        if terminal in sources:
            errors.append(f"Terminal state {terminal} must not have outgoing transitions")

    for state in IvrState:
        if state not in TERMINAL_STATES and state not in sources:
            errors.append(f"Non-terminal state {state} has no outgoing transitions")

    unreachable = set(IvrState) - _reachable(table, INITIAL_STATE)
    for state in sorted(unreachable):
        errors.append(f"State {state} is unreachable from {INITIAL_STATE}")

    for transition in table.values():
        outcomes = ACTION_OUTCOMES[transition.action] if transition.action else frozenset()
        for outcome in sorted(outcomes):
            if (transition.target, outcome) not in table:
                errors.append(
                    f"Action {transition.action} may emit {outcome} but "
                    f"{transition.target} has no transition for it"
                )
        resolves_itself = bool(outcomes) or transition.target in auto_advance
        if transition.target in RELAY_STATES and not resolves_itself:
            errors.append(
                f"Transition {transition.source} --{transition.event}--> {transition.target} "
                "would leave the session resting on a relay state"
            )

    for state, event in auto_advance.items():
        if (state, event) not in table:
            errors.append(f"Auto-advance {state} on {event} has no transition")
        elif table[(state, event)].target in auto_advance:
            errors.append(f"Auto-advance from {state} chains into another auto-advance state")

    return errors
