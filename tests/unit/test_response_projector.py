"""Testes da projeção estado → prompt."""

from __future__ import annotations

from bank_ivr.application.ivr_service import build_response
from bank_ivr.application.response_projector import PROMPTS, project, validate_prompts
from bank_ivr.domain.session.states import IvrState


class TestResponseProjector:
    def test_every_state_has_prompt(self) -> None:
        assert validate_prompts() == []
        assert set(PROMPTS) == set(IvrState)

    def test_auth_method_prompt(self) -> None:
        prompt = project(IvrState.AUTHENTICATION_METHOD)
        assert prompt.next_action == "COLLECT_AUTH_METHOD"
        assert "1 for SSN" in prompt.prompt_message
        assert prompt.authenticated is False

    def test_post_auth_states_flag_authenticated(self) -> None:
        """Menus pós-autenticação sempre reportam authenticated=true."""
        for state in (
            IvrState.MAIN_MENU,
            IvrState.ACCOUNT_SERVICES,
            IvrState.BALANCE_INQUIRY,
            IvrState.TRANSACTION_HISTORY,
            IvrState.TRANSFER_FUNDS,
        ):
            assert project(state).authenticated is True

    def test_end_call_flags_call_ended(self) -> None:
        prompt = project(IvrState.END_CALL)
        assert prompt.call_ended is True
        assert prompt.next_action == "END_CALL"

    def test_build_response_payload_is_camel_case(self) -> None:
        """Contrato JSON: camelCase e campos nulos omitidos."""
        payload = build_response("abc", IvrState.ERROR).to_payload()
        assert payload == {
            "sessionId": "abc",
            "currentState": "ERROR",
            "nextAction": "COLLECT_ERROR_RESPONSE",
            "promptMessage": "Authentication failed. Press 1 to try again or 0 to end the call",
            "authenticated": False,
            "callEnded": False,
        }
