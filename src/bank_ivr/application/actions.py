"""Ações de autenticação anexadas às transições do FSM.

Contrato:
- Cada ação recebe as credenciais da sessão (mutáveis) e o payload do evento
- Roda de forma síncrona até o fim, dentro do dispatch que a disparou
- Retorna o evento de desfecho (AUTHENTICATION_SUCCESS/FAILURE) ou None
- Chamadas ao backend têm orçamento de tempo; estouro vira
  AuthenticationTimeoutError (o engine converte em falha)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from bank_ivr.domain.credentials import Credentials
from bank_ivr.domain.errors import AuthenticationTimeoutError
from bank_ivr.domain.protocols.authenticator import AuthenticationResult, Authenticator
from bank_ivr.domain.session.events import IvrEvent
from bank_ivr.domain.session.transitions import ActionId
from bank_ivr.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


def mask_ssn(ssn: str | None) -> str:
    """Mascara SSN para logs (XXX-XX-6789)."""
    if ssn is None or len(ssn) < 5:
        return "INVALID_SSN"
    return "XXX-XX-" + ssn[-4:]


def mask_card_number(card_number: str | None) -> str:
    """Mascara número de cartão para logs (XXXX-XXXX-XXXX-1111)."""
    if card_number is None or len(card_number) < 4:
        return "INVALID_CARD"
    return "XXXX-XXXX-XXXX-" + card_number[-4:]


class ActionExecutor:
    """Executa as ações de autenticação contra o backend."""

    def __init__(
        self,
        authenticator: Authenticator,
        timeout_seconds: float = 5.0,
        max_workers: int = 8,
    ) -> None:
        self._authenticator = authenticator
        self._timeout_seconds = timeout_seconds
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ivr-auth")
        self._handlers: dict[ActionId, Callable[[Credentials, str | None], IvrEvent | None]] = {
            ActionId.VALIDATE_SSN: self.validate_ssn,
            ActionId.STORE_CARD_NUMBER: self.store_card_number,
            ActionId.VALIDATE_PIN_AND_CARD: self.validate_pin_and_card,
        }

    def run(
        self, action: ActionId, credentials: Credentials, payload: str | None
    ) -> IvrEvent | None:
        """Executa a ação indicada e retorna o evento de desfecho (ou None)."""
        handler = self._handlers.get(action)
        if handler is None:
            raise ValueError(f"Unknown action: {action}")
        return handler(credentials, payload)

    def validate_ssn(self, credentials: Credentials, ssn: str | None) -> IvrEvent:
        """Armazena o SSN e valida no backend."""
        credentials.ssn = ssn
        logger.debug("Validating SSN", extra={"ssn_masked": mask_ssn(ssn)})

        result = self._call_backend(
            "validate_ssn", self._authenticator.authenticate_by_ssn, ssn or ""
        )
        return self._apply_result(credentials, result, method="ssn")

    def store_card_number(self, credentials: Credentials, card_number: str | None) -> None:
        """Armazena o cartão; validação acontece só após o PIN."""
        credentials.card_number = card_number
        credentials.pin = None
        logger.debug(
            "Storing card number", extra={"card_masked": mask_card_number(card_number)}
        )
        return None

    def validate_pin_and_card(self, credentials: Credentials, pin: str | None) -> IvrEvent:
        """Armazena o PIN e valida (cartão, PIN) no backend."""
        credentials.pin = pin
        logger.debug(
            "Validating card and PIN",
            extra={"card_masked": mask_card_number(credentials.card_number)},
        )

        result = self._call_backend(
            "validate_pin_and_card",
            self._authenticator.authenticate_by_card_and_pin,
            credentials.card_number or "",
            pin or "",
        )
        return self._apply_result(credentials, result, method="card")

    def shutdown(self) -> None:
        """Libera as threads do backend (chamado no shutdown da app)."""
        self._pool.shutdown(wait=False, cancel_futures=True)

    def _call_backend(
        self,
        component: str,
        call: Callable[..., AuthenticationResult],
        *args: str,
    ) -> AuthenticationResult:
        """Chama o backend respeitando o orçamento de tempo.

        Exceções do backend propagam para o engine, que as trata como falha.
        """
        start = time.perf_counter()
        future = self._pool.submit(call, *args)
        try:
            return future.result(timeout=self._timeout_seconds)
        except FutureTimeoutError as exc:
            future.cancel()
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.warning(
                "Authentication backend timed out",
                extra={"component": component, "elapsed_ms": elapsed_ms},
            )
            raise AuthenticationTimeoutError(
                f"{component} exceeded {self._timeout_seconds}s budget"
            ) from exc

    def _apply_result(
        self, credentials: Credentials, result: AuthenticationResult, method: str
    ) -> IvrEvent:
        if result.authenticated:
            credentials.mark_authenticated(result.customer_id)
            logger.info(
                "Authentication successful",
                extra={"method": method, "customer_id": result.customer_id},
            )
            return IvrEvent.AUTHENTICATION_SUCCESS

        credentials.mark_failed()
        logger.info("Authentication failed", extra={"method": method})
        return IvrEvent.AUTHENTICATION_FAILURE
