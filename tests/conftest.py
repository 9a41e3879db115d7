import pytest

from chemprice.catalog import get_catalog
from chemprice.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    get_catalog.cache_clear()
    yield
    get_settings.cache_clear()
    get_catalog.cache_clear()


@pytest.fixture()
def commerce_env(monkeypatch):
    monkeypatch.setenv("COMMERCE_API_BASE_URL", "https://shop.example.com/wp-json/wc/v3")
    monkeypatch.setenv("COMMERCE_API_KEY", "ck_test")
    monkeypatch.setenv("COMMERCE_API_SECRET", "cs_test")
    get_settings.cache_clear()
    return get_settings()
