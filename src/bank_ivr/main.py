"""Entrypoint ASGI: `uvicorn bank_ivr.main:app`."""

from __future__ import annotations

from bank_ivr.api.app import create_app

app = create_app()
