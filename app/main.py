from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import get_settings
from app.core.errors import CatalogError
from app.core.lifespan import lifespan
from app.api.v1.routers.productos import router as productos_router
from app.api.v1.routers.health import router as health_router
from app.core.logging import configure_logging

import logging
import uvicorn

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# ALLOWED_ORIGINS from env (CSV), e.g. ALLOWED_ORIGINS="https://tienda.example,https://admin.example"
# Not set -> no CORS headers (same-origin tooling only)
if settings.allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=86400,
    )

# ------- Errors -------
@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.to_dict())
    else:
        logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def body_error_handler(request: Request, exc: RequestValidationError):
    # body missing, not JSON, or not an object
    detalles = [f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()]
    logger.info("%s %s -> 400 invalid body %s", request.method, request.url.path, detalles)
    return JSONResponse(status_code=400, content={"error": "Datos inválidos", "detalles": detalles})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # unmatched path or method
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Ruta no encontrada"})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

# ------- Routes -------
app.include_router(health_router)
app.include_router(productos_router)


def run():
    logger.info("Servidor corriendo en http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
