"""Engine FSM: intérprete da tabela de transições.

- Determinístico: mesmo estado + evento + resposta do backend → mesmo resultado
- Ações rodam de forma síncrona dentro do dispatch; o evento de desfecho é
  despachado recursivamente a partir do alvo da transição
- Estados de repasse (VALIDATING, AUTHENTICATED) nunca são commitados
- Commit atômico sob o lock da sessão
- Auditável: logs estruturados sem PII
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bank_ivr.application.actions import ActionExecutor
from bank_ivr.application.session.models import Session
from bank_ivr.domain.credentials import Credentials
from bank_ivr.domain.errors import AuthenticationTimeoutError, SessionNotFoundError
from bank_ivr.domain.session.events import IvrEvent
from bank_ivr.domain.session.states import TERMINAL_STATES, IvrState
from bank_ivr.domain.session.transitions import AUTO_ADVANCE, Transition, get_transition
from bank_ivr.observability.logging import get_logger, log_fallback, short_id
from bank_ivr.observability.timing import timed

logger: logging.Logger = get_logger(__name__)

SLOW_DISPATCH_MS = 1000.0


@dataclass(slots=True)
class FSMDispatchResult:
    """Resultado da execução do dispatcher FSM.

    Contém:
    - previous_state: estado antes do dispatch
    - state: estado commitado (igual ao anterior se rejeitado)
    - accepted: se a transição foi aceita
    - reason: motivo da rejeição (se rejeitado)
    - outcome_event: desfecho sintetizado por ação (se houve)
    - path: estados percorridos, incluindo repasses internos
    """

    previous_state: IvrState
    state: IvrState
    event: IvrEvent
    accepted: bool = False
    reason: str | None = None
    outcome_event: IvrEvent | None = None
    path: list[IvrState] = field(default_factory=list)

    def is_terminal(self) -> bool:
        """True se o estado resultante é terminal."""
        return self.state in TERMINAL_STATES


@dataclass(slots=True)
class _Resolution:
    state: IvrState | None
    reason: str | None = None
    outcome_event: IvrEvent | None = None
    path: list[IvrState] = field(default_factory=list)


class FSMEngine:
    """Dispatcher determinístico com ações síncronas."""

    def __init__(self, actions: ActionExecutor) -> None:
        self._actions = actions

    def dispatch(
        self,
        session: Session,
        event: IvrEvent,
        payload: str | None = None,
    ) -> FSMDispatchResult:
        """Executa a transição para o estado corrente da sessão.

        Args:
            session: sessão dona do estado (lock adquirido aqui)
            event: evento disparador
            payload: dados do evento (ex.: dígitos do SSN)

        Returns:
            FSMDispatchResult com o estado commitado ou a rejeição

        Raises:
            SessionNotFoundError: sessão encerrada enquanto aguardava o lock

        Contrato:
        - Rejeição é resultado normal, não exceção
        - Falha de ação vira AUTHENTICATION_FAILURE
        - No máximo um dispatch em andamento por sessão
        """
        with session.lock:
            if session.ended:
                raise SessionNotFoundError(session.session_id)

            previous = session.current_state
            with timed("fsm_dispatch", slow_ms=SLOW_DISPATCH_MS, event=str(event)):
                resolution = self._resolve(previous, event, payload, session.credentials)

            if resolution.state is None:
                logger.debug(
                    "FSM transition rejected",
                    extra={
                        "session_id": short_id(session.session_id),
                        "current_state": previous,
                        "event": event,
                        "error": resolution.reason,
                    },
                )
                return FSMDispatchResult(
                    previous_state=previous,
                    state=previous,
                    event=event,
                    accepted=False,
                    reason=resolution.reason,
                )

            session.commit(resolution.state)
            logger.info(
                "State change",
                extra={
                    "session_id": short_id(session.session_id),
                    "from_state": previous,
                    "to_state": resolution.state,
                    "event": event,
                    "version": session.version,
                },
            )
            return FSMDispatchResult(
                previous_state=previous,
                state=resolution.state,
                event=event,
                accepted=True,
                outcome_event=resolution.outcome_event,
                path=resolution.path,
            )

    def _resolve(
        self,
        state: IvrState,
        event: IvrEvent,
        payload: str | None,
        credentials: Credentials,
    ) -> _Resolution:
        """Resolve (estado, evento) até um estado de repouso, sem commitar."""
        transition = get_transition(state, event)
        if transition is None:
            return _Resolution(state=None, reason=f"No transition from {state} on event {event}")

        if transition.action is None:
            return self._land(transition.target)

        outcome = self._run_action(transition, payload, credentials)
        if outcome is None:
            return self._land(transition.target)

        nested = self._resolve(transition.target, outcome, None, credentials)
        if nested.state is None:
            logger.error(
                "Action outcome has no transition",
                extra={"state": transition.target, "outcome": outcome},
            )
            return nested
        nested.path.insert(0, transition.target)
        nested.outcome_event = outcome
        return nested

    def _land(self, target: IvrState) -> _Resolution:
        """Chega em `target`; estados de auto-avanço re-disparam na hora."""
        auto_event = AUTO_ADVANCE.get(target)
        if auto_event is None:
            return _Resolution(state=target, path=[target])

        advanced = get_transition(target, auto_event)
        if advanced is None:
            return _Resolution(state=None, reason=f"No auto-advance from {target} on {auto_event}")
        return _Resolution(state=advanced.target, path=[target, advanced.target])

    def _run_action(
        self,
        transition: Transition,
        payload: str | None,
        credentials: Credentials,
    ) -> IvrEvent | None:
        """Executa a ação; qualquer exceção vira AUTHENTICATION_FAILURE."""
        try:
            return self._actions.run(transition.action, credentials, payload)
        except Exception as exc:  # noqa: BLE001
            logger.exception(
                "Action failed; treating as authentication failure",
                extra={"action": transition.action, "error": type(exc).__name__},
            )
            timed_out = isinstance(exc, AuthenticationTimeoutError)
            reason = "timeout" if timed_out else type(exc).__name__
            log_fallback(logger, str(transition.action), reason=reason)
            credentials.mark_failed()
            return IvrEvent.AUTHENTICATION_FAILURE
