# app/api/v1/routers/health.py
import time
import subprocess
from fastapi import APIRouter, Depends
from app.api.deps import catalog_dep
from app.core.config import get_settings
from app.domain.services.catalog_svc import CatalogService

router = APIRouter(tags=["health"])
START_TIME = time.time()


def _git_sha(short: bool = True) -> str:
    try:
        cmd = ["git", "rev-parse", "--short" if short else "HEAD"]
        return subprocess.check_output(cmd, stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        return "unknown"


@router.get("/health")
async def health(catalog: CatalogService = Depends(catalog_dep)):
    """
    Health check:
    - store 'missing' is fine (no products yet), only an unreadable file is an error
    - exposes basic app info + global status
    """
    settings = get_settings()
    store = catalog.store
    checks: dict[str, object] = {
        "app_name": settings.APP_NAME,
        "env": settings.APP_ENV,
        "debug": settings.DEBUG,
        "version": settings.GIT_SHA if settings.GIT_SHA != "unknown" else _git_sha(),
        "uptime_seconds": int(time.time() - START_TIME),
        "store_path": str(store.path),
    }

    # --- Store ---
    if not store.path.exists():
        checks["store"] = "missing"
    else:
        try:
            productos = await store.load()
            checks["store"] = "ok"
            checks["productos"] = len(productos)
        except Exception as e:
            checks["store"] = f"error: {e}"

    status = "ok" if checks["store"] in ("ok", "missing") else "error"
    return {"status": status, "checks": checks, "timestamp": int(time.time())}
