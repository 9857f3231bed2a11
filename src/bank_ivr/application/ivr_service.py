"""IvrService: orquestra registro, mapeamento de entrada, engine e projeção.

Fluxo de um passo:
1. Registro resolve a sessão (SessionNotFoundError se inexistente)
2. Sob o lock da sessão: entrada → evento (input_mapper)
3. Engine executa a transição (ações síncronas) e commita
4. Projeção do estado resultante vira a resposta
5. END_CALL encerra e remove a sessão
"""

from __future__ import annotations

import logging

from bank_ivr.application.fsm_engine import FSMEngine
from bank_ivr.application.input_mapper import map_input
from bank_ivr.application.response_projector import project
from bank_ivr.application.session.registry import SessionRegistry
from bank_ivr.domain.errors import SessionNotFoundError
from bank_ivr.domain.models import IvrResponse
from bank_ivr.domain.session.events import IvrEvent
from bank_ivr.domain.session.states import IvrState
from bank_ivr.observability.logging import get_logger, short_id

logger: logging.Logger = get_logger(__name__)


def build_response(session_id: str, state: IvrState) -> IvrResponse:
    """Monta a resposta padrão para o estado."""
    prompt = project(state)
    return IvrResponse(
        session_id=session_id,
        current_state=state,
        next_action=prompt.next_action,
        prompt_message=prompt.prompt_message,
        authenticated=prompt.authenticated,
        call_ended=prompt.call_ended,
    )


class IvrService:
    """Casos de uso da chamada IVR expostos à camada HTTP."""

    def __init__(self, registry: SessionRegistry, engine: FSMEngine) -> None:
        self._registry = registry
        self._engine = engine

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    def start_session(self) -> IvrResponse:
        """Cria sessão e dispara CALL_CONNECTED."""
        session = self._registry.create()
        result = self._engine.dispatch(session, IvrEvent.CALL_CONNECTED)
        return build_response(session.session_id, result.state)

    def process_input(
        self,
        session_id: str,
        user_input: str | None,
        input_type: str | None = None,
    ) -> IvrResponse:
        """Processa uma entrada do chamador.

        Raises:
            SessionNotFoundError: sessão inexistente ou encerrada
        """
        session = self._registry.get(session_id)

        with session.lock:
            if session.ended:
                raise SessionNotFoundError(session_id)

            current = session.current_state
            logger.info(
                "Processing input",
                extra={
                    "session_id": short_id(session_id),
                    "state": current,
                    "input_type": input_type,
                },
            )

            mapped = map_input(current, user_input)
            if mapped is None:
                logger.warning(
                    "Input not recognized for state",
                    extra={"session_id": short_id(session_id), "state": current},
                )
                session.touch()
                return build_response(session_id, current)

            result = self._engine.dispatch(session, mapped.event, mapped.payload)
            if result.is_terminal():
                self._registry.end(session_id)
                logger.info("Call ended", extra={"session_id": short_id(session_id)})

            return build_response(session_id, result.state)

    def current_state(self, session_id: str) -> IvrResponse:
        """Consulta o estado corrente sem disparar eventos."""
        session = self._registry.get(session_id)
        with session.lock:
            if session.ended:
                raise SessionNotFoundError(session_id)
            return build_response(session_id, session.current_state)

    def end_session(self, session_id: str) -> IvrResponse:
        """Encerra a sessão a pedido do cliente."""
        self._registry.end(session_id)
        return IvrResponse(
            session_id=session_id,
            next_action="END_CALL",
            prompt_message="Session ended",
            call_ended=True,
        )
