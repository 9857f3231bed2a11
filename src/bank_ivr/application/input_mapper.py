"""Mapeia entrada bruta do chamador (teclas DTMF) para eventos de domínio.

- Menus: tabela por estado de token → evento
- Prompts de credencial: evento fixo, a própria entrada é o payload
- Folhas de transação: qualquer entrada conclui a transação
- Token desconhecido → None (o chamador é re-apresentado ao prompt)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from bank_ivr.domain.session.events import IvrEvent
from bank_ivr.domain.session.states import IvrState


@dataclass(frozen=True, slots=True)
class MappedInput:
    """Evento derivado da entrada e seu payload (quando houver)."""

    event: IvrEvent
    payload: str | None = None


MENU_TOKENS: Mapping[IvrState, Mapping[str, IvrEvent]] = MappingProxyType(
    {
        IvrState.AUTHENTICATION_METHOD: MappingProxyType(
            {
                "1": IvrEvent.SELECT_SSN_AUTH,
                "2": IvrEvent.SELECT_CARD_AUTH,
                "0": IvrEvent.END_CALL,
            }
        ),
        IvrState.ERROR: MappingProxyType(
            {
                "1": IvrEvent.BACK,
                "0": IvrEvent.END_CALL,
            }
        ),
        IvrState.MAIN_MENU: MappingProxyType(
            {
                "1": IvrEvent.SELECT_ACCOUNT_SERVICES,
                "0": IvrEvent.END_CALL,
            }
        ),
        IvrState.ACCOUNT_SERVICES: MappingProxyType(
            {
                "1": IvrEvent.SELECT_BALANCE_INQUIRY,
                "2": IvrEvent.SELECT_TRANSACTION_HISTORY,
                "3": IvrEvent.SELECT_TRANSFER_FUNDS,
                "9": IvrEvent.BACK,
            }
        ),
    }
)

PAYLOAD_EVENTS: Mapping[IvrState, IvrEvent] = MappingProxyType(
    {
        IvrState.SSN_PROMPT: IvrEvent.ENTER_SSN,
        IvrState.CARD_NUMBER_PROMPT: IvrEvent.ENTER_CARD_NUMBER,
        IvrState.PIN_PROMPT: IvrEvent.ENTER_PIN,
    }
)

TRANSACTION_STATES = frozenset(
    {
        IvrState.BALANCE_INQUIRY,
        IvrState.TRANSACTION_HISTORY,
        IvrState.TRANSFER_FUNDS,
    }
)


def map_input(state: IvrState, raw_input: str | None) -> MappedInput | None:
    """Traduz (estado, entrada bruta) em evento; None = entrada não reconhecida."""
    token = (raw_input or "").strip()

    payload_event = PAYLOAD_EVENTS.get(state)
    if payload_event is not None:
        if not token:
            return None
        return MappedInput(event=payload_event, payload=token)

    if state in TRANSACTION_STATES:
        return MappedInput(event=IvrEvent.COMPLETE_TRANSACTION)

    event = MENU_TOKENS.get(state, {}).get(token)
    if event is None:
        return None
    return MappedInput(event=event)
