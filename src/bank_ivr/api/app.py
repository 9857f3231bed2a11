"""Fábrica da aplicação FastAPI."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bank_ivr.api.routes import router
from bank_ivr.application.actions import ActionExecutor
from bank_ivr.application.fsm_engine import FSMEngine
from bank_ivr.application.ivr_service import IvrService
from bank_ivr.application.response_projector import validate_prompts
from bank_ivr.application.session import IdleSessionSweeper, SessionRegistry
from bank_ivr.config.settings import Settings, get_settings
from bank_ivr.domain.errors import TransitionTableError
from bank_ivr.domain.session.transitions import validate_transition_table
from bank_ivr.infra import create_authenticator
from bank_ivr.observability.logging import configure_logging, get_logger
from bank_ivr.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: inicia a varredura de inatividade. Shutdown: para e libera threads."""
    settings: Settings = app.state.settings
    sweeper: IdleSessionSweeper = app.state.sweeper
    if settings.session_sweeper_enabled:
        sweeper.start()
    try:
        yield
    finally:
        sweeper.stop()
        app.state.action_executor.shutdown()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Cria a aplicação FastAPI."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name)

    validation_errors: list[str] = []
    validation_errors.extend(settings.validate_session_config())
    validation_errors.extend(settings.validate_auth_config())

    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida: {error_msg}")

    table_errors = validate_transition_table() + validate_prompts()
    if table_errors:
        logger.error("Transition table invalid", extra={"errors": table_errors})
        raise TransitionTableError("; ".join(table_errors))

    app = FastAPI(title=settings.service_name, version=settings.version, lifespan=lifespan)
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(router)

    app.state.settings = settings

    registry = SessionRegistry(idle_timeout_seconds=settings.session_idle_timeout_seconds)
    executor = ActionExecutor(
        create_authenticator(settings.auth_backend),
        timeout_seconds=settings.auth_timeout_seconds,
        max_workers=settings.auth_max_workers,
    )
    app.state.session_registry = registry
    app.state.action_executor = executor
    app.state.ivr_service = IvrService(registry, FSMEngine(executor))
    app.state.sweeper = IdleSessionSweeper(
        registry, interval_seconds=settings.session_sweep_interval_seconds
    )

    logger.info(
        "Application created",
        extra={"environment": settings.environment, "auth_backend": settings.auth_backend},
    )
    return app
