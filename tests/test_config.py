"""Tests for configuration loading and app wiring."""

from datetime import timedelta

import pytest

from mtc_api.core.config import Settings
from mtc_api.main import create_app


def test_settings_defaults():
    cfg = Settings(_env_file=None)
    assert cfg.database_url.startswith("sqlite+aiosqlite://")
    assert cfg.jwt_algorithm == "HS256"
    assert cfg.jwt_expire_days == 7
    assert cfg.bcrypt_rounds == 12
    assert cfg.seed_projects is True


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("MTC_SECRET_KEY", "from-env")
    monkeypatch.setenv("MTC_BCRYPT_ROUNDS", "10")
    monkeypatch.setenv("MTC_SEED_PROJECTS", "false")
    monkeypatch.setenv("MTC_CORS_ORIGINS", '["https://mtc.example.org"]')

    cfg = Settings(_env_file=None)
    assert cfg.secret_key == "from-env"
    assert cfg.bcrypt_rounds == 10
    assert cfg.seed_projects is False
    assert cfg.cors_origins == ["https://mtc.example.org"]


def test_context_is_built_from_settings(settings):
    app = create_app(settings.model_copy(update={"jwt_expire_days": 3}))
    ctx = app.state.context
    assert ctx.settings.jwt_expire_days == 3
    assert ctx.issuer.ttl == timedelta(days=3)
    assert ctx.database.url == settings.database_url


def test_prod_requires_secret_key(settings):
    prod = settings.model_copy(
        update={"environment": "prod", "secret_key": Settings.model_fields["secret_key"].default}
    )
    with pytest.raises(RuntimeError):
        create_app(prod)
