from __future__ import annotations
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Union
import math

from app.domain.models.product import ProductoPayload

MIN_DESCRIPCION_LEN = 10

MSG_NOMBRE_REQUIRED = "El campo nombre es obligatorio"
MSG_NOMBRE_EMPTY = "El campo nombre no puede estar vacío"
MSG_PRECIO_REQUIRED = "El campo precio es obligatorio"
MSG_PRECIO_INVALID = "El precio debe ser un número positivo mayor a cero"
MSG_DESCRIPCION_REQUIRED = "El campo descripción es obligatorio"
MSG_DESCRIPCION_INVALID = f"La descripción debe tener un mínimo de {MIN_DESCRIPCION_LEN} caracteres"
MSG_DISPONIBLE_INVALID = "El campo disponible debe ser un valor booleano (true o false)"
MSG_BODY_NOT_OBJECT = "El cuerpo de la solicitud debe ser un objeto JSON"


class FieldState(Enum):
    ABSENT = "absent"
    INVALID = "invalid"
    VALID = "valid"


def _is_nombre(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""

def _is_precio(v: Any) -> bool:
    # bool is an int subclass in Python, but true/false are not prices
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    # ints are exact (a 400-digit literal is still finite); only floats can be nan/inf
    if isinstance(v, float) and not math.isfinite(v):
        return False
    return v > 0

def _is_descripcion(v: Any) -> bool:
    return isinstance(v, str) and len(v) >= MIN_DESCRIPCION_LEN

def _is_disponible(v: Any) -> bool:
    return isinstance(v, bool)


# field -> (check, message when missing on create (None = optional), message when invalid, falsy counts as missing)
RULES: Dict[str, tuple[Callable[[Any], bool], str | None, str, bool]] = {
    "nombre": (_is_nombre, MSG_NOMBRE_REQUIRED, MSG_NOMBRE_EMPTY, True),
    "precio": (_is_precio, MSG_PRECIO_REQUIRED, MSG_PRECIO_INVALID, False),
    "descripcion": (_is_descripcion, MSG_DESCRIPCION_REQUIRED, MSG_DESCRIPCION_INVALID, False),
    "disponible": (_is_disponible, None, MSG_DISPONIBLE_INVALID, False),
}


def field_state(payload: ProductoPayload, field: str) -> FieldState:
    if not payload.has(field):
        return FieldState.ABSENT
    check = RULES[field][0]
    return FieldState.VALID if check(getattr(payload, field)) else FieldState.INVALID


def validate_producto(
    payload: Union[ProductoPayload, Mapping[str, Any]],
    is_update: bool = False,
) -> List[str]:
    """
    Check a create/update payload and return every violation found (empty list = valid).
    - create: nombre, precio and descripcion are required (an empty nombre also counts as missing)
    - update: nothing is required, but any field sent must be valid
    Never raises.
    """
    if not isinstance(payload, ProductoPayload):
        payload = ProductoPayload.model_validate(dict(payload))

    violations: List[str] = []
    for field, (_, required_msg, invalid_msg, falsy_is_missing) in RULES.items():
        state = field_state(payload, field)
        # "" / null nombre on create is both missing and invalid (two messages)
        missing = state is FieldState.ABSENT or (falsy_is_missing and not getattr(payload, field))
        if missing and not is_update and required_msg:
            violations.append(required_msg)
        if state is FieldState.INVALID:
            violations.append(invalid_msg)
    return violations
