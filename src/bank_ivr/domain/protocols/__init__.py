"""Protocolos de domínio (contratos de colaboradores externos)."""

from bank_ivr.domain.protocols.authenticator import AuthenticationResult, Authenticator

__all__ = [
    "AuthenticationResult",
    "Authenticator",
]
