"""Geradores de identificadores (sessão de chamada e correlação de logs)."""

from __future__ import annotations

import uuid


def new_session_id() -> str:
    """session_id de uma chamada: UUID4 canônico, não sequencial nem adivinhável."""
    return str(uuid.uuid4())


def new_correlation_id() -> str:
    """Id de correlação de request: 32 hex, sem hífens (cabe em qualquer header)."""
    return uuid.uuid4().hex
