"""Sessão IVR: model, registro e varredura de inatividade."""

from bank_ivr.application.session.models import Session
from bank_ivr.application.session.registry import SessionRegistry
from bank_ivr.application.session.sweeper import IdleSessionSweeper

__all__ = ["Session", "SessionRegistry", "IdleSessionSweeper"]
