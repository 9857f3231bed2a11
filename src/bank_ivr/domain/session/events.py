"""Eventos que disparam transições de estado no FSM IVR.

- Eventos externos vêm da entrada do chamador (via input_mapper)
- AUTHENTICATION_SUCCESS/FAILURE são sintetizados pelas ações de validação
- Cada evento + estado atual → próximo estado (tabela de transições)
"""

from __future__ import annotations

from enum import StrEnum


class IvrEvent(StrEnum):
    """15 eventos canônicos do fluxo IVR."""

    # === Conexão ===
    CALL_CONNECTED = "CALL_CONNECTED"

    # === Autenticação (entrada do chamador) ===
    SELECT_SSN_AUTH = "SELECT_SSN_AUTH"
    SELECT_CARD_AUTH = "SELECT_CARD_AUTH"
    ENTER_SSN = "ENTER_SSN"
    """Payload: dígitos do SSN."""

    ENTER_CARD_NUMBER = "ENTER_CARD_NUMBER"
    """Payload: número do cartão."""

    ENTER_PIN = "ENTER_PIN"
    """Payload: PIN."""

    # === Desfecho de validação (sintetizados pelas ações) ===
    AUTHENTICATION_SUCCESS = "AUTHENTICATION_SUCCESS"
    AUTHENTICATION_FAILURE = "AUTHENTICATION_FAILURE"

    # === Menus ===
    SELECT_ACCOUNT_SERVICES = "SELECT_ACCOUNT_SERVICES"
    SELECT_BALANCE_INQUIRY = "SELECT_BALANCE_INQUIRY"
    SELECT_TRANSACTION_HISTORY = "SELECT_TRANSACTION_HISTORY"
    SELECT_TRANSFER_FUNDS = "SELECT_TRANSFER_FUNDS"
    COMPLETE_TRANSACTION = "COMPLETE_TRANSACTION"
    BACK = "BACK"

    # === Encerramento ===
    END_CALL = "END_CALL"


OUTCOME_EVENTS = frozenset({IvrEvent.AUTHENTICATION_SUCCESS, IvrEvent.AUTHENTICATION_FAILURE})
"""Eventos produzidos por ações de validação (nunca vêm do chamador)."""
