# app/api/v1/routers/productos.py

from __future__ import annotations
from contextlib import contextmanager
from typing import Annotated, Any, List, Optional
import re
import time

from fastapi import APIRouter, Body, Depends, status

from app.api.deps import catalog_dep
from app.core.errors import OperationFailed, StoreCorruptionError
from app.domain.models.product import Producto, ProductoPayload, ProductoResponse
from app.domain.services.catalog_svc import CatalogService

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/productos", tags=["productos"])

CatalogDep = Annotated[CatalogService, Depends(catalog_dep)]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_id(raw: str) -> Optional[int]:
    """
    parseInt-like: leading (signed) digits, the rest is ignored.
    '12abc' -> 12, 'abc' -> None (matches no product).
    """
    m = _LEADING_INT.match(raw)
    return int(m.group(1)) if m else None


@contextmanager
def storage_errors(message: str):
    """Wrap I/O and corrupt-file failures with the operation's error message (-> 500)."""
    try:
        yield
    except (OSError, StoreCorruptionError) as e:
        logger.exception("%s: %s", message, e)
        raise OperationFailed(message, e) from e


# /disponibles must be declared before /{product_id}
@router.get("", response_model=List[Producto])
async def list_productos(catalog: CatalogDep):
    with storage_errors("Error al leer los productos"):
        return await catalog.list_all()


@router.get("/disponibles", response_model=List[Producto])
async def list_productos_disponibles(catalog: CatalogDep):
    with storage_errors("Error al leer los productos"):
        return await catalog.list_available()


@router.get("/{product_id}", response_model=Producto)
async def get_producto(product_id: str, catalog: CatalogDep):
    with storage_errors("Error al buscar el producto"):
        return await catalog.get(parse_id(product_id))


@router.post("", response_model=ProductoResponse, status_code=status.HTTP_201_CREATED)
async def create_producto(payload: ProductoPayload, catalog: CatalogDep):
    logger.info("Request: create_producto fields=%s", sorted(payload.model_fields_set))
    start_time = time.perf_counter()
    with storage_errors("Error al crear el producto"):
        producto = await catalog.create(payload)
    logger.info("Response: create_producto id=%s elapsed_time=%.4fs", producto.id, time.perf_counter() - start_time)
    return ProductoResponse(mensaje="Producto creado exitosamente", producto=producto)


@router.put("/{product_id}", response_model=ProductoResponse)
async def update_producto(
    product_id: str,
    catalog: CatalogDep,
    # raw body: the id lookup runs before any body check (unknown id = 404 even with no body)
    body: Annotated[Any, Body()] = None,
):
    logger.info(
        "Request: update_producto id=%s fields=%s",
        product_id, sorted(body) if isinstance(body, dict) else type(body).__name__,
    )
    with storage_errors("Error al actualizar el producto"):
        producto = await catalog.update(parse_id(product_id), body)
    return ProductoResponse(mensaje="Producto actualizado exitosamente", producto=producto)


@router.delete("/{product_id}", response_model=ProductoResponse)
async def delete_producto(product_id: str, catalog: CatalogDep):
    logger.info("Request: delete_producto id=%s", product_id)
    with storage_errors("Error al eliminar el producto"):
        producto = await catalog.delete(parse_id(product_id))
    return ProductoResponse(mensaje="Producto eliminado exitosamente", producto=producto)
