# app/domain/repositories/product_store.py

from __future__ import annotations
from pathlib import Path
from typing import List, Sequence
import asyncio
import json
import logging
import os
import time

from pydantic import TypeAdapter, ValidationError

from app.core.errors import StoreCorruptionError
from app.domain.models.product import Producto
from app.utils.locks import PathLock

logger = logging.getLogger(__name__)

_productos_adapter = TypeAdapter(List[Producto])


class ProductStore:
    """
    Whole-collection persistence of productos in a single JSON file.
    - load(): missing file = empty catalog; unreadable content = StoreCorruptionError
    - save(): full rewrite through a sibling temp file + replace (readers never see a partial file)
    No caching: every call goes to disk.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.lock = PathLock(self.path)

    async def load(self) -> List[Producto]:
        return await asyncio.to_thread(self._load_sync)

    async def save(self, productos: Sequence[Producto]) -> None:
        await asyncio.to_thread(self._save_sync, list(productos))

    # ----- blocking helpers (run in a worker thread) ------------------------

    def _load_sync(self) -> List[Producto]:
        t0 = time.perf_counter()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("store load path=%s missing -> empty catalog", self.path)
            return []
        except UnicodeDecodeError as e:
            raise StoreCorruptionError(str(self.path), f"not UTF-8 text: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreCorruptionError(str(self.path), f"invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise StoreCorruptionError(str(self.path), "top-level JSON must be an array")

        try:
            productos = _productos_adapter.validate_python(data)
        except ValidationError as e:
            raise StoreCorruptionError(str(self.path), f"invalid product record: {e.errors()[0]['msg']}") from e

        logger.debug("store load path=%s items=%s time=%.3fs", self.path, len(productos), time.perf_counter() - t0)
        return productos

    def _save_sync(self, productos: List[Producto]) -> None:
        t0 = time.perf_counter()
        serialized = json.dumps([p.model_dump() for p in productos], ensure_ascii=False, indent=2)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as fh:
                fh.write(serialized)
                fh.flush()
                os.fsync(fh.fileno())
            temp_path.replace(self.path)
        finally:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)

        logger.debug("store save path=%s items=%s time=%.3fs", self.path, len(productos), time.perf_counter() - t0)
