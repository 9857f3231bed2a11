"""Credenciais em andamento de uma sessão (contexto estendido tipado)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Credentials:
    """Dados coletados entre as transições de autenticação.

    Existe apenas enquanto a sessão dona existir; nunca é persistido.
    """

    ssn: str | None = None
    card_number: str | None = None
    pin: str | None = None
    authenticated: bool = False
    customer_id: str | None = None

    def mark_authenticated(self, customer_id: str | None) -> None:
        self.authenticated = True
        self.customer_id = customer_id

    def mark_failed(self) -> None:
        self.authenticated = False
        self.customer_id = None
