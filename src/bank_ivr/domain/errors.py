"""Hierarquia de exceções do domínio IVR."""

from __future__ import annotations


class IvrError(Exception):
    """Erro base do serviço IVR."""


class SessionNotFoundError(IvrError):
    """Sessão inexistente (nunca criada, já encerrada ou expulsa por inatividade)."""

    def __init__(self, session_id: str | None) -> None:
        super().__init__("Session not found")
        self.session_id = session_id


class TransitionTableError(IvrError):
    """Tabela de transições inconsistente (erro de programação, fatal no boot)."""


class AuthenticationTimeoutError(IvrError):
    """Backend de autenticação excedeu o orçamento de tempo da chamada."""
