"""Registro de sessões em memória: dono exclusivo das instâncias de Session.

Concorrência:
- Um lock curto protege apenas o mapa session_id → Session (insert/lookup/remove)
- Toda mutação de uma sessão passa pelo lock da própria sessão
- Ordem de aquisição: lock da sessão → lock do mapa (nunca o inverso)
- Sessões diferentes nunca se bloqueiam mutuamente
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from bank_ivr.application.session.models import Session
from bank_ivr.domain.errors import SessionNotFoundError
from bank_ivr.observability.logging import get_logger, short_id
from bank_ivr.utils.ids import new_session_id

logger: logging.Logger = get_logger(__name__)


class SessionRegistry:
    """Mapa de sessões ativas (não persiste entre restarts)."""

    def __init__(
        self,
        idle_timeout_seconds: float = 300.0,
        clock: Callable[[], float] | None = None,
        id_factory: Callable[[], str] = new_session_id,
    ) -> None:
        self._idle_timeout_seconds = idle_timeout_seconds
        self._clock = clock or time.monotonic
        self._id_factory = id_factory
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    @property
    def idle_timeout_seconds(self) -> float:
        return self._idle_timeout_seconds

    def create(self) -> Session:
        """Cria e registra uma nova sessão em WELCOME."""
        with self._lock:
            session_id = self._id_factory()
            while session_id in self._sessions:
                session_id = self._id_factory()
            session = Session(session_id=session_id, clock=self._clock)
            self._sessions[session_id] = session

        logger.info("New session created", extra={"session_id": short_id(session_id)})
        return session

    def get(self, session_id: str | None) -> Session:
        """Retorna a sessão ativa.

        Raises:
            SessionNotFoundError: se não existe (ou já foi encerrada)
        """
        with self._lock:
            session = self._sessions.get(session_id) if session_id else None
        if session is None:
            logger.debug("Session not found", extra={"session_id": short_id(session_id)})
            raise SessionNotFoundError(session_id)
        return session

    def exists(self, session_id: str | None) -> bool:
        with self._lock:
            return bool(session_id) and session_id in self._sessions

    def end(self, session_id: str | None) -> Session:
        """Encerra e remove a sessão.

        Apenas o primeiro `end` de uma sessão tem sucesso; os seguintes
        levantam SessionNotFoundError. Espera o evento em andamento na
        sessão terminar antes de removê-la.
        """
        with self._lock:
            session = self._sessions.get(session_id) if session_id else None
        if session is None:
            raise SessionNotFoundError(session_id)

        with session.lock:
            if session.ended:
                raise SessionNotFoundError(session_id)
            with self._lock:
                if self._sessions.get(session.session_id) is session:
                    del self._sessions[session.session_id]
            session.ended = True

        logger.info(
            "Session ended",
            extra={"session_id": short_id(session_id), "final_state": session.current_state},
        )
        return session

    def evict_idle(self) -> list[str]:
        """Remove sessões inativas além do timeout; retorna ids expulsos.

        Adquire o lock de cada sessão antes de expulsar, então nunca corre
        em paralelo com um dispatch em andamento na mesma sessão.
        """
        with self._lock:
            candidates = list(self._sessions.values())

        evicted: list[str] = []
        for session in candidates:
            if session.idle_for() < self._idle_timeout_seconds:
                continue
            with session.lock:
                if session.ended or session.idle_for() < self._idle_timeout_seconds:
                    continue
                with self._lock:
                    if self._sessions.get(session.session_id) is session:
                        del self._sessions[session.session_id]
                session.ended = True
            evicted.append(session.session_id)
            logger.info(
                "Session evicted (idle)",
                extra={
                    "session_id": short_id(session.session_id),
                    "final_state": session.current_state,
                },
            )
        return evicted

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
