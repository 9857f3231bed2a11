"""Infraestrutura: implementações de colaboradores externos."""

from __future__ import annotations

from bank_ivr.domain.protocols.authenticator import Authenticator
from bank_ivr.infra.authenticator_memory import InMemoryAuthenticator


def create_authenticator(backend: str = "memory") -> Authenticator:
    """Factory do backend de autenticação.

    Args:
        backend: "memory" (dados de demonstração)

    Raises:
        ValueError: Se backend inválido
    """
    if backend.lower() == "memory":
        return InMemoryAuthenticator()
    raise ValueError(f"Unknown authenticator backend: {backend}")


__all__ = [
    "InMemoryAuthenticator",
    "create_authenticator",
]
