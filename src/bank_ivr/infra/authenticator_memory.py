"""Backend de autenticação em memória (dados de demonstração; não usar em produção)."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType

from bank_ivr.domain.protocols.authenticator import AuthenticationResult, Authenticator
from bank_ivr.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

DEMO_SSN_TO_CUSTOMER: Mapping[str, str] = MappingProxyType(
    {
        "123-45-6789": "CUST001",
        "987-65-4321": "CUST002",
    }
)

DEMO_CARDS: Mapping[str, tuple[str, str]] = MappingProxyType(
    {
        # cartão → (PIN, customer_id)
        "4111111111111111": ("1234", "CUST001"),
        "5555555555554444": ("5678", "CUST002"),
    }
)

_SEPARATORS = re.compile(r"[\s-]")
_NINE_DIGITS = re.compile(r"\d{9}")


def normalize_ssn(ssn: str | None) -> str | None:
    """Normaliza SSN para o formato AAA-GG-SSSS.

    Retorna None quando o SSN é vazio, não tem 9 dígitos ou usa área
    nunca emitida (000, 666).
    """
    if ssn is None or not ssn.strip():
        return None

    digits = _SEPARATORS.sub("", ssn)
    if not _NINE_DIGITS.fullmatch(digits):
        return None

    if digits.startswith(("000", "666")):
        return None

    return f"{digits[:3]}-{digits[3:5]}-{digits[5:]}"


class InMemoryAuthenticator(Authenticator):
    """Consulta mapas fixos; estado imutável, seguro para uso concorrente."""

    def __init__(
        self,
        ssn_to_customer: Mapping[str, str] | None = None,
        cards: Mapping[str, tuple[str, str]] | None = None,
    ) -> None:
        self._ssn_to_customer = dict(
            DEMO_SSN_TO_CUSTOMER if ssn_to_customer is None else ssn_to_customer
        )
        self._cards = dict(DEMO_CARDS if cards is None else cards)

    def authenticate_by_ssn(self, ssn: str) -> AuthenticationResult:
        formatted = normalize_ssn(ssn)
        if formatted is None:
            logger.debug("SSN authentication failed: invalid format")
            return AuthenticationResult.failed()

        customer_id = self._ssn_to_customer.get(formatted)
        if customer_id is None:
            logger.debug("SSN authentication failed: not found")
            return AuthenticationResult.failed()

        logger.debug("SSN authentication successful", extra={"customer_id": customer_id})
        return AuthenticationResult(authenticated=True, customer_id=customer_id)

    def authenticate_by_card_and_pin(self, card_number: str, pin: str) -> AuthenticationResult:
        record = self._cards.get(card_number or "")
        if record is None or record[0] != pin:
            logger.debug("Card/PIN authentication failed")
            return AuthenticationResult.failed()

        customer_id = record[1]
        logger.debug("Card/PIN authentication successful", extra={"customer_id": customer_id})
        return AuthenticationResult(authenticated=True, customer_id=customer_id)
