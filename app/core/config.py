from functools import lru_cache
from typing import Literal
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]

ENV_FILES: dict[str, str] = {
    "development": ".env.development",
    "production": ".env.production",
}


class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "ProductosAPI"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Storage
    PRODUCTOS_FILE: str = "productos.json"   # JSON array of productos, rewritten in full on each mutation

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS (CSV). Empty = CORS middleware not installed
    ALLOWED_ORIGINS: str = ""

    # env file is passed per instance by get_settings(); real env vars always win over it
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True)

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Settings for APP_ENV (read from the process env before anything else), cached for Depends()."""
    env_file = ENV_FILES.get(os.getenv("APP_ENV", "development"), ENV_FILES["development"])
    return Settings(_env_file=env_file, _env_file_encoding="utf-8")
