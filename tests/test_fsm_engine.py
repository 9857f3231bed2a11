"""Testes unitários do FSMEngine.

Cobertura:
- Transições simples e rejeições
- Resolução síncrona dos estados de repasse (VALIDATING, AUTHENTICATED)
- Falha/timeout do backend viram AUTHENTICATION_FAILURE
- Versão e commit sob o lock da sessão
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

import pytest

from bank_ivr.application.actions import ActionExecutor
from bank_ivr.application.fsm_engine import FSMEngine
from bank_ivr.application.session.models import Session
from bank_ivr.domain.errors import SessionNotFoundError
from bank_ivr.domain.protocols.authenticator import AuthenticationResult, Authenticator
from bank_ivr.domain.session.events import IvrEvent
from bank_ivr.domain.session.states import RELAY_STATES, IvrState
from bank_ivr.infra.authenticator_memory import InMemoryAuthenticator


class ExplodingAuthenticator(Authenticator):
    """Backend que sempre falha com exceção."""

    def authenticate_by_ssn(self, ssn: str) -> AuthenticationResult:
        raise ConnectionError("backend down")

    def authenticate_by_card_and_pin(self, card_number: str, pin: str) -> AuthenticationResult:
        raise ConnectionError("backend down")


class BlockingAuthenticator(Authenticator):
    """Backend que só responde quando `release` é sinalizado."""

    def __init__(self) -> None:
        self.release = threading.Event()

    def authenticate_by_ssn(self, ssn: str) -> AuthenticationResult:
        self.release.wait(5)
        return AuthenticationResult(authenticated=True, customer_id="CUST001")

    def authenticate_by_card_and_pin(self, card_number: str, pin: str) -> AuthenticationResult:
        self.release.wait(5)
        return AuthenticationResult(authenticated=True, customer_id="CUST001")


def _engine(authenticator: Authenticator, timeout: float = 5.0) -> Iterator[FSMEngine]:
    executor = ActionExecutor(authenticator, timeout_seconds=timeout, max_workers=2)
    try:
        yield FSMEngine(executor)
    finally:
        executor.shutdown()


@pytest.fixture
def engine() -> Iterator[FSMEngine]:
    yield from _engine(InMemoryAuthenticator())


def _session(state: IvrState = IvrState.WELCOME) -> Session:
    return Session(session_id="sess-0001-abcdef", current_state=state)


class TestFSMEngineBasic:
    """Testes básicos de transição FSM."""

    def test_welcome_to_auth_method(self, engine: FSMEngine) -> None:
        """WELCOME + CALL_CONNECTED → AUTHENTICATION_METHOD."""
        session = _session()
        result = engine.dispatch(session, IvrEvent.CALL_CONNECTED)
        assert result.accepted is True
        assert result.previous_state == IvrState.WELCOME
        assert result.state == IvrState.AUTHENTICATION_METHOD
        assert session.current_state == IvrState.AUTHENTICATION_METHOD
        assert session.version == 1

    def test_rejected_event_keeps_state(self, engine: FSMEngine) -> None:
        """Evento sem transição não muda estado nem versão."""
        session = _session(IvrState.MAIN_MENU)
        result = engine.dispatch(session, IvrEvent.ENTER_PIN)
        assert result.accepted is False
        assert result.state == IvrState.MAIN_MENU
        assert "No transition" in result.reason
        assert session.current_state == IvrState.MAIN_MENU
        assert session.version == 0

    def test_end_call_is_terminal(self, engine: FSMEngine) -> None:
        session = _session(IvrState.MAIN_MENU)
        result = engine.dispatch(session, IvrEvent.END_CALL)
        assert result.state == IvrState.END_CALL
        assert result.is_terminal() is True

    def test_ended_session_raises(self, engine: FSMEngine) -> None:
        """Sessão encerrada enquanto aguardava o lock não aceita eventos."""
        session = _session()
        session.ended = True
        with pytest.raises(SessionNotFoundError):
            engine.dispatch(session, IvrEvent.CALL_CONNECTED)


class TestFSMEngineRelayResolution:
    """Estados de repasse são resolvidos no mesmo dispatch."""

    def test_valid_ssn_lands_on_main_menu(self, engine: FSMEngine) -> None:
        """SSN válido: VALIDATING → AUTHENTICATED → MAIN_MENU."""
        session = _session(IvrState.SSN_PROMPT)
        result = engine.dispatch(session, IvrEvent.ENTER_SSN, "123-45-6789")

        assert result.accepted is True
        assert result.state == IvrState.MAIN_MENU
        assert result.outcome_event == IvrEvent.AUTHENTICATION_SUCCESS
        assert result.path == [IvrState.VALIDATING, IvrState.AUTHENTICATED, IvrState.MAIN_MENU]
        assert session.credentials.authenticated is True
        assert session.credentials.customer_id == "CUST001"
        assert session.version == 1

    def test_unknown_ssn_lands_on_error(self, engine: FSMEngine) -> None:
        session = _session(IvrState.SSN_PROMPT)
        result = engine.dispatch(session, IvrEvent.ENTER_SSN, "111-11-1111")

        assert result.state == IvrState.ERROR
        assert result.outcome_event == IvrEvent.AUTHENTICATION_FAILURE
        assert session.credentials.authenticated is False
        assert session.credentials.customer_id is None

    def test_card_number_is_stored_without_validation(self, engine: FSMEngine) -> None:
        session = _session(IvrState.CARD_NUMBER_PROMPT)
        result = engine.dispatch(session, IvrEvent.ENTER_CARD_NUMBER, "4111111111111111")

        assert result.state == IvrState.PIN_PROMPT
        assert result.outcome_event is None
        assert session.credentials.card_number == "4111111111111111"

    def test_card_and_pin_success(self, engine: FSMEngine) -> None:
        session = _session(IvrState.CARD_NUMBER_PROMPT)
        engine.dispatch(session, IvrEvent.ENTER_CARD_NUMBER, "5555555555554444")
        result = engine.dispatch(session, IvrEvent.ENTER_PIN, "5678")

        assert result.state == IvrState.MAIN_MENU
        assert session.credentials.customer_id == "CUST002"
        assert session.version == 2

    def test_wrong_pin_lands_on_error(self, engine: FSMEngine) -> None:
        session = _session(IvrState.CARD_NUMBER_PROMPT)
        engine.dispatch(session, IvrEvent.ENTER_CARD_NUMBER, "4111111111111111")
        result = engine.dispatch(session, IvrEvent.ENTER_PIN, "0000")
        assert result.state == IvrState.ERROR

    def test_relay_state_never_committed(self, engine: FSMEngine) -> None:
        """Nenhum dispatch deixa a sessão parada em estado de repasse."""
        for ssn in ("123-45-6789", "000-00-0000", ""):
            session = _session(IvrState.SSN_PROMPT)
            engine.dispatch(session, IvrEvent.ENTER_SSN, ssn)
            assert session.current_state not in RELAY_STATES

    def test_deterministic(self, engine: FSMEngine) -> None:
        """Mesmo estado + evento + resposta do backend → mesmo resultado."""
        results = []
        for _ in range(3):
            session = _session(IvrState.SSN_PROMPT)
            results.append(engine.dispatch(session, IvrEvent.ENTER_SSN, "987654321").state)
        assert results == [IvrState.MAIN_MENU] * 3


class TestFSMEngineBackendFailures:
    """Falhas do backend nunca escapam do dispatch."""

    def test_backend_exception_becomes_failure(self, caplog) -> None:
        with caplog.at_level(logging.INFO):
            for engine in _engine(ExplodingAuthenticator()):
                session = _session(IvrState.SSN_PROMPT)
                result = engine.dispatch(session, IvrEvent.ENTER_SSN, "123-45-6789")

        assert result.accepted is True
        assert result.state == IvrState.ERROR
        assert result.outcome_event == IvrEvent.AUTHENTICATION_FAILURE
        assert session.credentials.authenticated is False
        assert any(getattr(r, "fallback_used", False) for r in caplog.records)

    def test_backend_timeout_becomes_failure(self) -> None:
        authenticator = BlockingAuthenticator()
        for engine in _engine(authenticator, timeout=0.05):
            session = _session(IvrState.SSN_PROMPT)
            result = engine.dispatch(session, IvrEvent.ENTER_SSN, "123-45-6789")
            authenticator.release.set()

        assert result.state == IvrState.ERROR
        assert session.credentials.authenticated is False

    def test_backend_timeout_logs_single_fallback(self, caplog) -> None:
        """Um estouro de tempo gera exatamente um registro de fallback."""
        authenticator = BlockingAuthenticator()
        with caplog.at_level(logging.INFO):
            for engine in _engine(authenticator, timeout=0.05):
                engine.dispatch(_session(IvrState.SSN_PROMPT), IvrEvent.ENTER_SSN, "123-45-6789")
                authenticator.release.set()

        fallback = [r for r in caplog.records if getattr(r, "fallback_used", False)]
        assert len(fallback) == 1
        assert fallback[0].reason == "timeout"  # type: ignore
        assert fallback[0].component == "validate_ssn"  # type: ignore

    def test_failure_after_card_clears_previous_success(self) -> None:
        """Falha de backend zera autenticação anterior."""
        for engine in _engine(ExplodingAuthenticator()):
            session = _session(IvrState.PIN_PROMPT)
            session.credentials.mark_authenticated("CUST001")
            session.credentials.card_number = "4111111111111111"
            result = engine.dispatch(session, IvrEvent.ENTER_PIN, "1234")

        assert result.state == IvrState.ERROR
        assert session.credentials.authenticated is False
        assert session.credentials.customer_id is None
