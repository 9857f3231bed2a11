from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from bank_ivr.api.app import create_app
from bank_ivr.config.settings import get_settings


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SESSION_SWEEPER_ENABLED", "false")
    get_settings.cache_clear()
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
    get_settings.cache_clear()
