from __future__ import annotations
import json
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    DATABASE_URL: str = "sqlite:///./shiftmarket.db"

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[list[str], NoDecode] = []

    # Tokens issued by the hosted auth provider
    AUTH_JWT_SECRET: str = "change-me-to-a-long-random-secret"
    AUTH_JWT_AUDIENCE: str = "authenticated"
    AUTH_JWT_ALGORITHM: str = "HS256"

    LOG_LEVEL: str = "INFO"

    # Cancellation policy
    LATE_CANCELLATION_THRESHOLD_HOURS: int = 24
    LATE_CANCELLATION_FEE: int = 500
    WORKER_BAN_DAYS: int = 30
    CURRENCY: str = "DKK"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            raw = v.strip()
            if raw.startswith("["):
                return json.loads(raw)
            return [x.strip() for x in raw.split(",") if x.strip()]
        return v


settings = Settings()
