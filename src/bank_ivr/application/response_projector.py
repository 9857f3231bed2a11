"""Projeção estado → prompt apresentado ao chamador.

Função pura e sem estado; uma entrada por estado. Textos são cópia de
produto e ficam em inglês.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from bank_ivr.domain.session.states import IvrState


@dataclass(frozen=True, slots=True)
class StatePrompt:
    """Descritor de resposta para um estado."""

    prompt_message: str
    next_action: str
    authenticated: bool = False
    call_ended: bool = False


PROMPTS: Mapping[IvrState, StatePrompt] = MappingProxyType(
    {
        IvrState.WELCOME: StatePrompt(
            "Welcome to the bank IVR system",
            "CONNECT_CALL",
        ),
        IvrState.AUTHENTICATION_METHOD: StatePrompt(
            "Please select your authentication method: 1 for SSN, 2 for Debit Card",
            "COLLECT_AUTH_METHOD",
        ),
        IvrState.SSN_PROMPT: StatePrompt(
            "Please enter your Social Security Number",
            "COLLECT_SSN",
        ),
        IvrState.CARD_NUMBER_PROMPT: StatePrompt(
            "Please enter your debit card number",
            "COLLECT_CARD_NUMBER",
        ),
        IvrState.PIN_PROMPT: StatePrompt(
            "Please enter your PIN",
            "COLLECT_PIN",
        ),
        IvrState.VALIDATING: StatePrompt(
            "Please wait while we validate your information",
            "WAIT",
        ),
        IvrState.AUTHENTICATED: StatePrompt(
            "You have been successfully authenticated",
            "PROCEED_TO_MENU",
            authenticated=True,
        ),
        IvrState.ERROR: StatePrompt(
            "Authentication failed. Press 1 to try again or 0 to end the call",
            "COLLECT_ERROR_RESPONSE",
        ),
        IvrState.MAIN_MENU: StatePrompt(
            "Main Menu: Press 1 for Account Services, 0 to end call",
            "COLLECT_MENU_SELECTION",
            authenticated=True,
        ),
        IvrState.ACCOUNT_SERVICES: StatePrompt(
            "Account Services: Press 1 for Balance, 2 for Transactions, "
            "3 for Transfers, 9 to go back",
            "COLLECT_SERVICE_SELECTION",
            authenticated=True,
        ),
        IvrState.BALANCE_INQUIRY: StatePrompt(
            "Your current balance is $1,234.56",
            "PRESENT_BALANCE",
            authenticated=True,
        ),
        IvrState.TRANSACTION_HISTORY: StatePrompt(
            "Recent transactions: $120.00 GROCERY, $45.50 GAS, $500.00 RENT",
            "PRESENT_TRANSACTIONS",
            authenticated=True,
        ),
        IvrState.TRANSFER_FUNDS: StatePrompt(
            "Transfer functionality would be implemented here",
            "PRESENT_TRANSFER_OPTIONS",
            authenticated=True,
        ),
        IvrState.END_CALL: StatePrompt(
            "Thank you for using our banking services. Goodbye!",
            "END_CALL",
            call_ended=True,
        ),
    }
)


def project(state: IvrState) -> StatePrompt:
    """Retorna o prompt do estado."""
    return PROMPTS[state]


def validate_prompts() -> list[str]:
    """Garante uma entrada por estado (validado no boot)."""
    return [f"State {state} has no prompt" for state in IvrState if state not in PROMPTS]
