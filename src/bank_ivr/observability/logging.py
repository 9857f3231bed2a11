"""Logging estruturado (JSON) do serviço IVR.

Todo record recebe correlation_id e service. Campos de credencial que
cheguem via `extra` (ssn, card_number, pin) são mascarados no handler,
antes da serialização.
"""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

from bank_ivr.observability.middleware import get_correlation_id

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(correlation_id)s %(service)s"
_SENSITIVE_FIELDS = ("ssn", "card_number", "pin")
_REDACTED = "***"
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class CorrelationIdFilter(logging.Filter):
    """Insere correlation_id e service no record de log."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        # correlation_id explícito no `extra` tem precedência
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id()
        record.service = self._service_name
        return True


class CredentialRedactionFilter(logging.Filter):
    """Mascara SSN, cartão e PIN que escaparem para o `extra`.

    PIN nunca aparece; SSN e cartão mantêm só os 4 últimos dígitos.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        for name in _SENSITIVE_FIELDS:
            value = getattr(record, name, None)
            if isinstance(value, str) and value:
                setattr(record, name, redact(name, value))
        return True


def redact(field_name: str, value: str) -> str:
    """Versão mascarada de um campo de credencial."""
    if field_name == "pin" or len(value) <= 4:
        return _REDACTED
    return _REDACTED + value[-4:]


def configure_logging(level: str, service_name: str) -> None:
    """Configura o root logger com um único handler JSON.

    Loggers do uvicorn passam a propagar para o root, então access log e
    erros do servidor saem no mesmo formato.
    """
    formatter = JsonFormatter(
        _LOG_FORMAT,
        rename_fields={"levelname": "level", "name": "logger"},
    )

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter(service_name))
    handler.addFilter(CredentialRedactionFilter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = []
        server_logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def short_id(session_id: str | None) -> str | None:
    """Trunca session_id para logs (8 primeiros caracteres)."""
    if not session_id:
        return None
    return session_id[:8] + "..."


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Registra que uma validação caiu no caminho de falha (sem PII).

    Args:
        logger: logger do módulo chamador
        component: ação afetada (ex: "validate_ssn", "validate_pin_and_card")
        reason: causa curta (ex: "timeout", "ConnectionError")
        elapsed_ms: tempo gasto até desistir, quando medido

    Exemplo:
        log_fallback(logger, "validate_ssn", reason="timeout", elapsed_ms=5002)
    """
    extra: dict[str, object] = {"fallback_used": True, "component": component}
    if reason:
        extra["reason"] = reason
    if elapsed_ms is not None:
        extra["elapsed_ms"] = elapsed_ms

    logger.info("Fallback applied for %s", component, extra=extra)
