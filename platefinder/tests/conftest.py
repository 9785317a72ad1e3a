from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from platefinder.analytics.store import clear_events
from platefinder.app import app, get_catalog_config
from platefinder.catalog.config import CatalogConfig
from platefinder.catalog.models import Store
from platefinder.recommendations.cache import clear_cache

from .factories import build_store


@pytest.fixture
def two_store_catalog() -> list[Store]:
    return [
        build_store("Tacos House", {"Tacos": [("Tacos Poulet", "50,00 MAD")]}),
        build_store("Pizza Roma", {"Pizzas": [("Margherita", "60,00 MAD")]}),
    ]


@pytest.fixture
def catalog_config(tmp_path) -> CatalogConfig:
    return CatalogConfig(data_dir=tmp_path / "data")


@pytest.fixture
def client(catalog_config):
    clear_cache()
    clear_events()
    app.dependency_overrides[get_catalog_config] = lambda: catalog_config
    yield TestClient(app)
    app.dependency_overrides.clear()
