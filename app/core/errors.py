# app/core/errors.py
"""
Domain errors of the catalog.

Every failure an operation can produce is one of the classes below. Each one
knows its HTTP status and renders its own response body, so the API layer
maps all of them through a single exception handler (see app/main.py).
"""
from __future__ import annotations
from typing import Any, Sequence


class CatalogError(Exception):
    status_code: int = 500

    def to_dict(self) -> dict[str, Any]:
        return {"error": str(self)}


class ValidationFailed(CatalogError):
    """Payload rejected by the validator. Nothing was written."""
    status_code = 400

    def __init__(self, violations: Sequence[str]):
        self.violations = list(violations)
        super().__init__("Datos inválidos")

    def to_dict(self) -> dict[str, Any]:
        return {"error": str(self), "detalles": self.violations}


class ProductNotFound(CatalogError):
    status_code = 404

    def __init__(self, product_id: int | None):
        self.product_id = product_id
        super().__init__("Producto no encontrado")


class StoreCorruptionError(CatalogError):
    """The backing file exists but does not hold a list of productos."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Archivo de productos inválido ({path}): {reason}")


class OperationFailed(CatalogError):
    """I/O or storage failure, wrapped with the message of the operation that hit it."""

    def __init__(self, message: str, cause: BaseException):
        self.cause = cause
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": str(self), "detalle": str(self.cause)}
