"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import Request

from bank_ivr.application.ivr_service import IvrService
from bank_ivr.config.settings import Settings


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_ivr_service(request: Request) -> IvrService:
    """Retorna o serviço de conversa IVR."""

    return request.app.state.ivr_service
