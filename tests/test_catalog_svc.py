import asyncio
import re

import pytest

from app.core.errors import ProductNotFound, ValidationFailed
from app.domain.models.product import Producto
from app.domain.services.catalog_svc import next_id
from app.domain.services.validation import MSG_BODY_NOT_OBJECT
from conftest import PEN, make_payload

ISO_UTC = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


async def _create(catalog, nombre="Producto", **extra):
    return await catalog.create(make_payload(nombre=nombre, precio=10, descripcion="Descripcion larga", **extra))


@pytest.mark.asyncio
async def test_create_builds_record(catalog):
    producto = await catalog.create(make_payload(**PEN))
    assert producto.id == 1
    assert producto.nombre == "Pen"
    assert producto.precio == 1.5
    assert producto.descripcion == "Blue ink pen"
    assert producto.disponible is True
    assert ISO_UTC.match(producto.fecha_ingreso)
    assert await catalog.list_all() == [producto]


@pytest.mark.asyncio
async def test_create_keeps_disponible_false(catalog):
    producto = await _create(catalog, disponible=False)
    assert producto.disponible is False


@pytest.mark.asyncio
async def test_sequential_creates_get_1_2_3(catalog):
    ids = [(await _create(catalog, nombre=f"P{i}")).id for i in range(3)]
    assert ids == [1, 2, 3]
    assert [p.nombre for p in await catalog.list_all()] == ["P0", "P1", "P2"]


@pytest.mark.asyncio
async def test_deleting_lowest_id_does_not_free_it(catalog):
    a = await _create(catalog, "A")
    await _create(catalog, "B")
    await catalog.delete(a.id)
    c = await _create(catalog, "C")
    assert c.id == 3


@pytest.mark.asyncio
async def test_deleting_highest_id_reissues_it(catalog):
    await _create(catalog, "A")
    b = await _create(catalog, "B")
    await catalog.delete(b.id)
    c = await _create(catalog, "C")
    assert c.id == 2


def test_next_id_is_max_plus_one():
    def p(pid):
        return Producto(id=pid, nombre="x", precio=1, descripcion="0123456789", fecha_ingreso="t")

    assert next_id([]) == 1
    assert next_id([p(5), p(2), p(9), p(3)]) == 10


@pytest.mark.asyncio
async def test_invalid_create_writes_nothing(catalog, store_path):
    with pytest.raises(ValidationFailed) as exc:
        await catalog.create(make_payload())
    assert len(exc.value.violations) == 3
    assert not store_path.exists()


@pytest.mark.asyncio
async def test_partial_update_only_touches_sent_fields(catalog):
    original = await _create(catalog, "Cuaderno", disponible=False)
    updated = await catalog.update(original.id, make_payload(precio=5))

    assert updated.precio == 5
    assert updated.model_dump(exclude={"precio"}) == original.model_dump(exclude={"precio"})
    assert await catalog.get(original.id) == updated


@pytest.mark.asyncio
async def test_update_trims_nombre_and_ignores_id_and_fecha(catalog):
    original = await _create(catalog)
    payload = make_payload(nombre="  Nuevo  ", disponible=False)
    updated = await catalog.update(original.id, payload)
    assert updated.nombre == "Nuevo"
    assert updated.disponible is False
    assert updated.id == original.id
    assert updated.fecha_ingreso == original.fecha_ingreso


@pytest.mark.asyncio
async def test_update_missing_id_is_not_found_before_validation(catalog):
    await _create(catalog)
    with pytest.raises(ProductNotFound):
        await catalog.update(42, make_payload(precio=-1))


@pytest.mark.asyncio
async def test_invalid_update_leaves_file_untouched(catalog, store_path):
    producto = await _create(catalog)
    before = store_path.read_bytes()
    with pytest.raises(ValidationFailed) as exc:
        await catalog.update(producto.id, make_payload(precio=0, descripcion="corta"))
    assert len(exc.value.violations) == 2
    assert store_path.read_bytes() == before


@pytest.mark.asyncio
async def test_delete_returns_removed_record_and_keeps_order(catalog):
    a = await _create(catalog, "A")
    b = await _create(catalog, "B")
    c = await _create(catalog, "C")
    assert await catalog.delete(b.id) == b
    assert await catalog.list_all() == [a, c]
    with pytest.raises(ProductNotFound):
        await catalog.get(b.id)
    with pytest.raises(ProductNotFound):
        await catalog.delete(b.id)


@pytest.mark.asyncio
async def test_get_without_id_is_not_found(catalog):
    await _create(catalog)
    with pytest.raises(ProductNotFound):
        await catalog.get(None)


@pytest.mark.asyncio
async def test_list_available_filters_and_keeps_order(catalog):
    a = await _create(catalog, "A")
    await _create(catalog, "B", disponible=False)
    c = await _create(catalog, "C")
    assert await catalog.list_available() == [a, c]


@pytest.mark.asyncio
async def test_concurrent_creates_get_distinct_ids(catalog):
    productos = await asyncio.gather(*(_create(catalog, f"P{i}") for i in range(20)))
    assert sorted(p.id for p in productos) == list(range(1, 21))
    stored = await catalog.list_all()
    assert len(stored) == 20
    assert len({p.id for p in stored}) == 20


@pytest.mark.asyncio
async def test_concurrent_updates_are_serialized(catalog):
    producto = await _create(catalog)
    precios = [float(i) for i in range(1, 11)]
    await asyncio.gather(*(catalog.update(producto.id, make_payload(precio=p)) for p in precios))
    stored = await catalog.list_all()
    assert len(stored) == 1
    assert stored[0].precio in precios


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [None, [1, 2], "texto"])
async def test_update_unknown_id_checks_existence_before_body(catalog, body):
    await _create(catalog)
    with pytest.raises(ProductNotFound):
        await catalog.update(42, body)


@pytest.mark.asyncio
async def test_update_accepts_plain_dict_and_rejects_non_object(catalog, store_path):
    producto = await _create(catalog)
    updated = await catalog.update(producto.id, {"precio": 3})
    assert updated.precio == 3

    before = store_path.read_bytes()
    with pytest.raises(ValidationFailed) as exc:
        await catalog.update(producto.id, ["precio", 4])
    assert exc.value.violations == [MSG_BODY_NOT_OBJECT]
    assert store_path.read_bytes() == before
