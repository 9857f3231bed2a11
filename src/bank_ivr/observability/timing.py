"""Medição de latência por componente (dispatch do FSM, chamadas ao backend)."""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import Iterator

from bank_ivr.observability.logging import get_logger

logger = get_logger(__name__)


@contextlib.contextmanager
def timed(
    component: str,
    slow_ms: float | None = None,
    **fields: object,
) -> Iterator[None]:
    """Mede o bloco e emite `component_latency` com `elapsed_ms`.

    Campos extras do chamador vão junto no log (nunca passar PII). Se
    `slow_ms` for informado e excedido, o log sobe para WARNING.

    Uso:
        with timed("fsm_dispatch", event="ENTER_SSN"):
            ...
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
        is_slow = slow_ms is not None and elapsed_ms > slow_ms
        logger.log(
            logging.WARNING if is_slow else logging.INFO,
            "component_latency",
            extra={"component": component, "elapsed_ms": elapsed_ms, "slow": is_slow, **fields},
        )
