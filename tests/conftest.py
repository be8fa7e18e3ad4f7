"""Shared fixtures: every test gets its own catalog file under tmp_path."""

import pytest
from fastapi.testclient import TestClient

from app.api.deps import catalog_dep
from app.domain.models.product import ProductoPayload
from app.domain.repositories.product_store import ProductStore
from app.domain.services.catalog_svc import CatalogService
from app.main import app


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "productos.json"


@pytest.fixture
def store(store_path):
    return ProductStore(store_path)


@pytest.fixture
def catalog(store):
    return CatalogService(store)


@pytest.fixture
def client(catalog):
    app.dependency_overrides[catalog_dep] = lambda: catalog
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_payload(**fields) -> ProductoPayload:
    return ProductoPayload.model_validate(fields)


PEN = {"nombre": " Pen ", "precio": 1.5, "descripcion": "Blue ink pen"}
