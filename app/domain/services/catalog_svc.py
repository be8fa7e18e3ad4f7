from __future__ import annotations
from typing import Any, List, Mapping, Optional, Sequence
import logging
import time

from app.core.errors import ProductNotFound, ValidationFailed
from app.domain.models.product import Producto, ProductoPayload, utc_timestamp
from app.domain.repositories.product_store import ProductStore
from app.domain.services.validation import MSG_BODY_NOT_OBJECT, validate_producto

logger = logging.getLogger(__name__)


def next_id(productos: Sequence[Producto]) -> int:
    """
    max(existing ids) + 1, or 1 for an empty catalog.
    Not a counter: deleting the highest id lets the next create reissue it.
    """
    return max((p.id for p in productos), default=0) + 1


def _index_of(productos: Sequence[Producto], product_id: Optional[int]) -> int:
    if product_id is not None:
        for i, p in enumerate(productos):
            if p.id == product_id:
                return i
    raise ProductNotFound(product_id)


def as_payload(body: Any) -> ProductoPayload:
    """Request body -> payload. No body = nothing to change; a non-object body is a violation."""
    if body is None:
        return ProductoPayload()
    if isinstance(body, ProductoPayload):
        return body
    if not isinstance(body, Mapping):
        raise ValidationFailed([MSG_BODY_NOT_OBJECT])
    return ProductoPayload.model_validate(dict(body))


def merge_producto(current: Producto, payload: ProductoPayload) -> Producto:
    """Overlay the fields sent in `payload`; id and fecha_ingreso are never touched."""
    changes = payload.present_fields()
    if "nombre" in changes:
        changes["nombre"] = changes["nombre"].strip()
    return current.model_copy(update=changes)


class CatalogService:
    """
    CRUD over the product catalog.
    Mutations run load -> modify -> save under the store's path lock, so ids stay
    unique and concurrent updates to one id resolve as last-write-wins.
    Reads skip the lock (saves are atomic renames).
    """

    def __init__(self, store: ProductStore):
        self.store = store

    async def list_all(self) -> List[Producto]:
        return await self.store.load()

    async def list_available(self) -> List[Producto]:
        return [p for p in await self.store.load() if p.disponible is True]

    async def get(self, product_id: Optional[int]) -> Producto:
        productos = await self.store.load()
        return productos[_index_of(productos, product_id)]

    async def create(self, payload: ProductoPayload) -> Producto:
        violations = validate_producto(payload)
        if violations:
            logger.info("create rejected violations=%s", violations)
            raise ValidationFailed(violations)

        t0 = time.perf_counter()
        async with self.store.lock:
            productos = await self.store.load()
            producto = Producto(
                id=next_id(productos),
                nombre=payload.nombre.strip(),
                precio=payload.precio,
                descripcion=payload.descripcion,
                disponible=payload.disponible if payload.has("disponible") else True,
                fecha_ingreso=utc_timestamp(),
            )
            productos.append(producto)
            await self.store.save(productos)

        logger.info("create done id=%s total=%s time=%.3fs", producto.id, len(productos), time.perf_counter() - t0)
        return producto

    async def update(self, product_id: Optional[int], body: Any) -> Producto:
        t0 = time.perf_counter()
        async with self.store.lock:
            productos = await self.store.load()
            # not-found wins over validation errors
            idx = _index_of(productos, product_id)

            payload = as_payload(body)
            violations = validate_producto(payload, is_update=True)
            if violations:
                logger.info("update rejected id=%s violations=%s", product_id, violations)
                raise ValidationFailed(violations)

            updated = merge_producto(productos[idx], payload)
            productos[idx] = updated
            await self.store.save(productos)

        logger.info(
            "update done id=%s fields=%s time=%.3fs",
            product_id, sorted(payload.present_fields()), time.perf_counter() - t0,
        )
        return updated

    async def delete(self, product_id: Optional[int]) -> Producto:
        t0 = time.perf_counter()
        async with self.store.lock:
            productos = await self.store.load()
            removed = productos.pop(_index_of(productos, product_id))
            await self.store.save(productos)

        logger.info("delete done id=%s total=%s time=%.3fs", removed.id, len(productos), time.perf_counter() - t0)
        return removed
