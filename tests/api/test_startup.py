"""
Tests for settings checks made when the app is built.
"""

import pytest
from fastapi.testclient import TestClient

from ledger_engine.config import Settings, check_settings
from ledger_engine.main import create_app


def test_default_settings_are_accepted():
    check_settings(Settings())


@pytest.mark.parametrize("currency", ["usd", "US", "EURO", ""])
def test_bad_default_currency_stops_startup(engine, currency):
    settings = Settings()
    settings.DEFAULT_CURRENCY = currency

    with pytest.raises(ValueError, match="DEFAULT_CURRENCY"):
        create_app(settings=settings, engine=engine)


def test_non_positive_lock_timeout_stops_startup(engine):
    settings = Settings()
    settings.LOCK_TIMEOUT_SECONDS = 0

    with pytest.raises(ValueError, match="LOCK_TIMEOUT_SECONDS"):
        create_app(settings=settings, engine=engine)


def test_configured_default_currency_is_used(engine):
    settings = Settings()
    settings.DEFAULT_CURRENCY = "CHF"

    with TestClient(create_app(settings=settings, engine=engine)) as client:
        response = client.post("/accounts", json={
            "user_id": "u1", "account_type": "checking",
        })

    assert response.status_code == 201
    assert response.json()["currency"] == "CHF"
