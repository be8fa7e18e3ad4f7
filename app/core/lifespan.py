# app/core/lifespan.py
from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from app.api.deps import catalog_dep
from app.core.errors import StoreCorruptionError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    catalog = app.dependency_overrides.get(catalog_dep, catalog_dep)()
    store = catalog.store

    # --- Startup ---
    # A corrupt file does not block startup: requests answer 500 until it is fixed
    if store.path.exists():
        try:
            productos = await store.load()
            logger.info("Catalog ready path=%s productos=%s", store.path, len(productos))
        except StoreCorruptionError as e:
            logger.error("Catalog file unreadable, serving 500s until fixed: %s", e)
    else:
        logger.warning("No catalog file at %s yet, it will be created on first write", store.path)

    # Application runs
    yield

    # --- Shutdown ---
    logger.info("Catalog API stopped")
