# app/api/deps.py
from functools import lru_cache
from app.core.config import get_settings
from app.domain.repositories.product_store import ProductStore
from app.domain.services.catalog_svc import CatalogService

# Dependency for injecting the catalog service (one per configured file).
# Tests swap it through app.dependency_overrides[catalog_dep].
@lru_cache
def catalog_dep() -> CatalogService:
    settings = get_settings()
    return CatalogService(ProductStore(settings.PRODUCTOS_FILE))
