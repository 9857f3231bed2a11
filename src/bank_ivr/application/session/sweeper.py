"""Varredura periódica de sessões inativas (thread em background)."""

from __future__ import annotations

import logging
import threading

from bank_ivr.application.session.registry import SessionRegistry
from bank_ivr.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class IdleSessionSweeper:
    """Chama `registry.evict_idle()` a cada `interval_seconds`.

    Independente do tratamento de requests; start/stop pelo lifespan da app.
    """

    def __init__(self, registry: SessionRegistry, interval_seconds: float) -> None:
        self._registry = registry
        self._interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="ivr-session-sweeper", daemon=True
        )
        self._thread.start()
        logger.info("Session sweeper started", extra={"interval_seconds": self._interval_seconds})

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Session sweeper stopped")

    def sweep_once(self) -> list[str]:
        """Uma passada de expulsão; erros são logados e não derrubam a thread."""
        try:
            return self._registry.evict_idle()
        except Exception as exc:  # noqa: BLE001
            logger.error("session_sweep_failed", extra={"error": type(exc).__name__})
            return []

    def _run(self) -> None:
        while not self._stop.wait(self._interval_seconds):
            evicted = self.sweep_once()
            if evicted:
                logger.info("Idle sessions evicted", extra={"count": len(evicted)})
