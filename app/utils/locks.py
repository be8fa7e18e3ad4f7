# app/utils/locks.py
from __future__ import annotations
from pathlib import Path
from typing import Dict, Tuple
import asyncio

# resolved path -> (loop the lock was created in, lock)
# asyncio locks belong to one loop: a different running loop gets a fresh lock
_path_locks: Dict[str, Tuple[asyncio.AbstractEventLoop, asyncio.Lock]] = {}


def path_key(path: str | Path) -> str:
    return str(Path(path).expanduser().resolve())


class PathLock:
    """
    Single-writer lock scoped to a file path (in-process only).
    Serializes load-modify-save cycles against the same backing file.
    Every store on the same path shares the lock of the running loop.
    """
    def __init__(self, path: str | Path):
        self.key = path_key(path)

    def current(self) -> asyncio.Lock:
        """Lock for this path in the running event loop (must be called from a coroutine)."""
        loop = asyncio.get_running_loop()
        entry = _path_locks.get(self.key)
        if entry is None or entry[0] is not loop:
            entry = _path_locks[self.key] = (loop, asyncio.Lock())
        return entry[1]

    async def acquire(self) -> bool:
        return await self.current().acquire()

    def release(self) -> None:
        self.current().release()

    def locked(self) -> bool:
        return self.current().locked()

    async def __aenter__(self) -> "PathLock":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()
