from pydantic import BaseModel, ConfigDict
from typing import Any, Union
from datetime import datetime, timezone


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with milliseconds and 'Z' suffix, e.g. 2025-01-31T12:00:00.000Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Producto(BaseModel):
    id: int
    nombre: str
    precio: Union[int, float]   # kept as sent (2 stays 2, 1.5 stays 1.5)
    descripcion: str
    disponible: bool = True
    fecha_ingreso: str

    model_config = {"frozen": True}  # immuable = safe


class ProductoPayload(BaseModel):
    """
    Incoming body for create/update.
    Fields are untyped on purpose: the validator reports wrong types as violations.
    Presence is read from `model_fields_set` (explicit null counts as sent).
    """
    nombre: Any = None
    precio: Any = None
    descripcion: Any = None
    disponible: Any = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    def has(self, field: str) -> bool:
        return field in self.model_fields_set

    def present_fields(self) -> dict[str, Any]:
        return {k: getattr(self, k) for k in type(self).model_fields if k in self.model_fields_set}


class ProductoResponse(BaseModel):
    mensaje: str
    producto: Producto
