"""Middleware HTTP: correlation-id por request e access log estruturado."""

from __future__ import annotations

import logging
import re
import time
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from bank_ivr.utils.ids import new_correlation_id

CORRELATION_HEADER = "x-correlation-id"

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
# ids externos aceitos: até 64 caracteres seguros para log
_VALID_INCOMING = re.compile(r"[A-Za-z0-9._-]{1,64}")

access_logger = logging.getLogger("bank_ivr.access")


def get_correlation_id() -> str:
    """Retorna o correlation_id do request corrente (ou vazio)."""
    return _correlation_id.get()


def resolve_correlation_id(incoming: str | None) -> str:
    """Reaproveita o id do cliente quando seguro; senão gera um novo."""
    if incoming and _VALID_INCOMING.fullmatch(incoming):
        return incoming
    return new_correlation_id()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Propaga correlation_id em cada passo da chamada IVR.

    O id fica disponível para todos os logs do request (inclusive nas
    threads do threadpool do FastAPI, que copiam o contexto) e volta no
    header da resposta.
    """

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        correlation_id = resolve_correlation_id(request.headers.get(CORRELATION_HEADER))
        token = _correlation_id.set(correlation_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            access_logger.info(
                "request_completed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
        finally:
            _correlation_id.reset(token)

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
