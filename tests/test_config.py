"""Tests for settings classes."""
import pytest
from pydantic import ValidationError

from assetdesk.core import config
from assetdesk.core.config import DevSettings, ProdSettings, settings


def test_test_settings_active():
    assert settings.ENV == "test"
    assert settings.STORE_BACKEND == "sql"


def test_defaults():
    cfg = config.TestSettings()

    assert cfg.DEFAULT_ASSET_ID_PATTERN == "A-####"
    assert cfg.ACTIVITY_FEED_LIMIT == 10
    assert cfg.DASHBOARD_RECENT_ACTIVITY == 5


def test_store_backend_normalised():
    assert DevSettings(STORE_BACKEND=" Memory ").STORE_BACKEND == "memory"
    with pytest.raises(ValidationError):
        DevSettings(STORE_BACKEND="redis")


def test_prod_requires_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(ValidationError):
        ProdSettings(_env_file=None, ENV="prod")


def test_prod_rejects_memory_store():
    with pytest.raises(ValidationError):
        ProdSettings(_env_file=None, ENV="prod", DATABASE_URL="postgresql://db/assetdesk", STORE_BACKEND="memory")


def test_heroku_url_rewritten():
    cfg = ProdSettings(_env_file=None, ENV="prod", DATABASE_URL="postgres://db/assetdesk")

    assert cfg.DATABASE_URL.startswith("postgresql://")
