"""Rotas HTTP da conversa IVR (/api/ivr)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from bank_ivr.api.dependencies import get_ivr_service, get_settings
from bank_ivr.application.ivr_service import IvrService
from bank_ivr.config.settings import Settings
from bank_ivr.domain.errors import SessionNotFoundError
from bank_ivr.domain.models import IvrRequest, IvrResponse
from bank_ivr.observability.logging import get_logger, short_id

logger = get_logger(__name__)

router = APIRouter()


def _reply(response: IvrResponse, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=response.to_payload())


def _not_found(session_id: str | None) -> JSONResponse:
    logger.warning("Session not found", extra={"session_id": short_id(session_id)})
    return _reply(
        IvrResponse(session_id=session_id, error_message="Session not found"),
        status.HTTP_404_NOT_FOUND,
    )


@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Healthcheck simples."""
    return {"status": "ok", "service": settings.service_name, "version": settings.version}


@router.post("/api/ivr/session")
def initialize_session(service: IvrService = Depends(get_ivr_service)) -> JSONResponse:
    """Cria sessão e já avança de WELCOME com CALL_CONNECTED."""
    response = service.start_session()
    logger.info("Initialized session", extra={"session_id": short_id(response.session_id)})
    return _reply(response)


@router.post("/api/ivr/process")
def process_user_input(
    request: IvrRequest,
    service: IvrService = Depends(get_ivr_service),
) -> JSONResponse:
    """Processa entrada do chamador e avança o FSM."""
    session_id = (request.session_id or "").strip()
    if not session_id:
        logger.warning("Request missing session ID")
        return _reply(
            IvrResponse(error_message="Session ID is required"),
            status.HTTP_400_BAD_REQUEST,
        )

    try:
        response = service.process_input(session_id, request.user_input, request.input_type)
    except SessionNotFoundError:
        return _not_found(session_id)

    return _reply(response)


@router.get("/api/ivr/session/{session_id}")
def get_session_state(
    session_id: str,
    service: IvrService = Depends(get_ivr_service),
) -> JSONResponse:
    """Consulta o estado corrente da sessão."""
    try:
        return _reply(service.current_state(session_id))
    except SessionNotFoundError:
        return _not_found(session_id)


@router.delete("/api/ivr/session/{session_id}")
def end_session(
    session_id: str,
    service: IvrService = Depends(get_ivr_service),
) -> JSONResponse:
    """Encerra a sessão (404 se já encerrada ou inexistente)."""
    try:
        response = service.end_session(session_id)
    except SessionNotFoundError:
        return _not_found(session_id)

    logger.info("Session ended by client", extra={"session_id": short_id(session_id)})
    return _reply(response)
