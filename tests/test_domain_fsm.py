"""Testes para a tabela de transições do FSM IVR."""

from types import MappingProxyType

import pytest

from bank_ivr.domain.errors import TransitionTableError
from bank_ivr.domain.session import (
    AUTO_ADVANCE,
    INITIAL_STATE,
    RELAY_STATES,
    TERMINAL_STATES,
    TRANSITIONS,
    IvrEvent,
    IvrState,
    Transition,
    get_transition,
    validate_transition,
    validate_transition_table,
)
from bank_ivr.domain.session.transitions import ActionId, _build


class TestTransitionTable:
    """Testes da tabela estática."""

    def test_table_is_consistent(self) -> None:
        """Tabela embarcada passa em todas as checagens estruturais."""
        assert validate_transition_table() == []

    def test_table_has_twenty_entries(self) -> None:
        assert len(TRANSITIONS) == 20

    def test_table_is_read_only(self) -> None:
        """Tabela não pode ser mutada em runtime."""
        assert isinstance(TRANSITIONS, MappingProxyType)
        with pytest.raises(TypeError):
            TRANSITIONS[(IvrState.WELCOME, IvrEvent.BACK)] = Transition(  # type: ignore[index]
                IvrState.WELCOME, IvrEvent.BACK, IvrState.END_CALL
            )

    def test_initial_and_terminal(self) -> None:
        assert INITIAL_STATE == IvrState.WELCOME
        assert TERMINAL_STATES == frozenset({IvrState.END_CALL})

    def test_terminal_has_no_outgoing(self) -> None:
        """END_CALL não tem nenhuma transição de saída."""
        assert all(source != IvrState.END_CALL for source, _ in TRANSITIONS)

    def test_actions_attached(self) -> None:
        """Ações ficam nas transições de entrada de credencial."""
        assert get_transition(IvrState.SSN_PROMPT, IvrEvent.ENTER_SSN).action == (
            ActionId.VALIDATE_SSN
        )
        assert get_transition(IvrState.CARD_NUMBER_PROMPT, IvrEvent.ENTER_CARD_NUMBER).action == (
            ActionId.STORE_CARD_NUMBER
        )
        assert get_transition(IvrState.PIN_PROMPT, IvrEvent.ENTER_PIN).action == (
            ActionId.VALIDATE_PIN_AND_CARD
        )

    def test_authenticated_auto_advances(self) -> None:
        assert AUTO_ADVANCE[IvrState.AUTHENTICATED] == IvrEvent.AUTHENTICATION_SUCCESS
        assert IvrState.AUTHENTICATED in RELAY_STATES

    def test_duplicate_entry_rejected(self) -> None:
        """Duas transições para o mesmo (estado, evento) = erro de programação."""
        entry = Transition(
            IvrState.WELCOME, IvrEvent.CALL_CONNECTED, IvrState.AUTHENTICATION_METHOD
        )
        with pytest.raises(TransitionTableError):
            _build([entry, entry])


class TestValidateTransition:
    """Testes de validate_transition."""

    def test_valid_transition(self) -> None:
        ok, target, reason = validate_transition(IvrState.WELCOME, IvrEvent.CALL_CONNECTED)
        assert ok is True
        assert target == IvrState.AUTHENTICATION_METHOD
        assert reason == ""

    def test_missing_transition(self) -> None:
        ok, target, reason = validate_transition(IvrState.MAIN_MENU, IvrEvent.ENTER_PIN)
        assert ok is False
        assert target is None
        assert "No transition" in reason

    def test_terminal_state(self) -> None:
        ok, target, reason = validate_transition(IvrState.END_CALL, IvrEvent.BACK)
        assert ok is False
        assert target is None
        assert "Terminal state" in reason

    def test_end_call_from_auth_method_not_in_table(self) -> None:
        """Menu de método oferece '0', mas a tabela não encerra a partir dele."""
        assert get_transition(IvrState.AUTHENTICATION_METHOD, IvrEvent.END_CALL) is None


class TestValidateTransitionTable:
    """Checagens estruturais detectam tabelas quebradas."""

    def _without(self, *keys: tuple[IvrState, IvrEvent]) -> dict:
        return {k: v for k, v in TRANSITIONS.items() if k not in keys}

    def test_detects_unreachable_state(self) -> None:
        table = self._without((IvrState.ACCOUNT_SERVICES, IvrEvent.SELECT_TRANSFER_FUNDS))
        errors = validate_transition_table(table)
        assert any("TRANSFER_FUNDS is unreachable" in e for e in errors)

    def test_detects_missing_outcome_transition(self) -> None:
        table = self._without((IvrState.VALIDATING, IvrEvent.AUTHENTICATION_FAILURE))
        errors = validate_transition_table(table)
        assert any("AUTHENTICATION_FAILURE" in e for e in errors)

    def test_detects_terminal_with_outgoing(self) -> None:
        table = dict(TRANSITIONS)
        extra = Transition(IvrState.END_CALL, IvrEvent.BACK, IvrState.WELCOME)
        table[(extra.source, extra.event)] = extra
        errors = validate_transition_table(table)
        assert any("Terminal state END_CALL" in e for e in errors)

    def test_detects_resting_on_relay_state(self) -> None:
        table = dict(TRANSITIONS)
        bad = Transition(IvrState.MAIN_MENU, IvrEvent.BACK, IvrState.VALIDATING)
        table[(bad.source, bad.event)] = bad
        errors = validate_transition_table(table)
        assert any("relay state" in e for e in errors)

    def test_detects_missing_auto_advance_transition(self) -> None:
        table = self._without((IvrState.AUTHENTICATED, IvrEvent.AUTHENTICATION_SUCCESS))
        errors = validate_transition_table(table)
        assert any("Auto-advance" in e for e in errors)

    def test_detects_mismatched_key(self) -> None:
        table = dict(TRANSITIONS)
        table[(IvrState.MAIN_MENU, IvrEvent.BACK)] = TRANSITIONS[
            (IvrState.ACCOUNT_SERVICES, IvrEvent.BACK)
        ]
        errors = validate_transition_table(table)
        assert any("does not match" in e for e in errors)
