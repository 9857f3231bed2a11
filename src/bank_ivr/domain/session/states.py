"""Estados canônicos de uma chamada IVR.

- Toda chamada começa em WELCOME e termina em END_CALL
- Estados de repasse (VALIDATING, AUTHENTICATED) são resolvidos dentro do
  mesmo dispatch e nunca ficam visíveis como estado de repouso
- Transições são explícitas (tabela em transitions.py)
"""

from __future__ import annotations

from enum import StrEnum


class IvrState(StrEnum):
    """14 estados canônicos do fluxo IVR."""

    # === Entrada ===
    WELCOME = "WELCOME"
    """Chamada conectada, saudação inicial."""

    # === Autenticação ===
    AUTHENTICATION_METHOD = "AUTHENTICATION_METHOD"
    """Escolha do método: SSN ou cartão de débito."""

    SSN_PROMPT = "SSN_PROMPT"
    """Aguardando digitação do SSN."""

    CARD_NUMBER_PROMPT = "CARD_NUMBER_PROMPT"
    """Aguardando número do cartão de débito."""

    PIN_PROMPT = "PIN_PROMPT"
    """Aguardando PIN do cartão informado."""

    VALIDATING = "VALIDATING"
    """Repasse interno: credenciais em validação no backend."""

    AUTHENTICATED = "AUTHENTICATED"
    """Repasse interno: autenticado, avança sozinho para MAIN_MENU."""

    # === Serviços (pós-autenticação) ===
    MAIN_MENU = "MAIN_MENU"
    ACCOUNT_SERVICES = "ACCOUNT_SERVICES"
    BALANCE_INQUIRY = "BALANCE_INQUIRY"
    TRANSACTION_HISTORY = "TRANSACTION_HISTORY"
    TRANSFER_FUNDS = "TRANSFER_FUNDS"

    # === Exceções / Encerramento ===
    ERROR = "ERROR"
    """Falha de autenticação; permite tentar de novo ou encerrar."""

    END_CALL = "END_CALL"
    """Terminal: chamada encerrada."""


INITIAL_STATE = IvrState.WELCOME
"""Único estado inicial."""

TERMINAL_STATES = frozenset({IvrState.END_CALL})
"""Estados sem transições de saída."""

RELAY_STATES = frozenset({IvrState.VALIDATING, IvrState.AUTHENTICATED})
"""Estados resolvidos internamente; nunca são estado de repouso."""

RESTING_STATES = frozenset({s for s in IvrState if s not in RELAY_STATES})
"""Estados em que a chamada aguarda a próxima entrada externa."""
