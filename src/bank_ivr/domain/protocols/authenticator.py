"""Contrato do backend de autenticação (colaborador externo)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthenticationResult:
    """Resultado de uma única tentativa de autenticação.

    O customer_id pertence a esta tentativa; o backend não guarda
    "último cliente autenticado" entre chamadas.
    """

    authenticated: bool
    customer_id: str | None = None

    @classmethod
    def failed(cls) -> AuthenticationResult:
        return cls(authenticated=False, customer_id=None)


class Authenticator(ABC):
    """Contrato mínimo síncrono do backend de autenticação.

    Implementações devem ser seguras para chamadas concorrentes.
    """

    @abstractmethod
    def authenticate_by_ssn(self, ssn: str) -> AuthenticationResult: ...

    @abstractmethod
    def authenticate_by_card_and_pin(self, card_number: str, pin: str) -> AuthenticationResult: ...
