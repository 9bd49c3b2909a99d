# hookguard/adapters/configuration/config.py

import json
from typing import Annotated, Optional, List, Union
from logging import getLevelName
from pydantic import Field, PostgresDsn, field_validator, ConfigDict
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"  # "development", "production", "testing"

    # Debug flag
    DEBUG: bool = False

    # Database
    DB_DRIVER: str = "asyncpg"
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    POSTGRES_HOST: Optional[str] = None
    POSTGRES_PORT: Optional[int] = None
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)
    STORE_TIMEOUT_SECONDS: float = 5.0

    # Webhook tokens
    TOKEN_HASHING_SALT: str
    DEFAULT_TOKEN_EXPIRATION_DAYS: int = 30
    MAX_TOKENS_PER_CLIENT: int = 5
    WEBHOOK_TOKEN_HEADER: str = "X-Webhook-Token"
    WEBHOOK_PROTECTED_PREFIXES: Annotated[List[str], NoDecode] = ["/api/v1/webhook"]

    # Rate limiting
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    MAX_REQUESTS_PER_WINDOW: int = 100
    RATE_LIMIT_CLEANUP_INTERVAL_SECONDS: int = 300

    # Administrative endpoints
    ADMIN_API_KEY: str

    @field_validator("DATABASE_URL", mode="before")
    def assemble_db_url(cls, value, info):
        if value:
            return str(value)

        data = info.data
        missing = [
            name for name in ("POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_DB")
            if not data.get(name)
        ]
        if missing:
            raise ValueError(f"DATABASE_URL not set and missing: {', '.join(missing)}")

        return str(PostgresDsn.build(
            scheme=f"postgresql+{data.get('DB_DRIVER', 'asyncpg')}",
            username=data["POSTGRES_USER"],
            password=data["POSTGRES_PASSWORD"],
            host=data["POSTGRES_HOST"],
            port=data["POSTGRES_PORT"],
            path=data["POSTGRES_DB"],
        ))

    @field_validator("WEBHOOK_PROTECTED_PREFIXES", mode="before")
    def assemble_protected_prefixes(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Accepts a CSV string ('a,b,c'), a JSON list string or a list.
        """
        if isinstance(v, str) and v.startswith("["):
            return json.loads(v)
        if isinstance(v, str):
            return [prefix.strip() for prefix in v.split(",") if prefix.strip()]
        if isinstance(v, list):
            return v
        raise ValueError(f"Invalid WEBHOOK_PROTECTED_PREFIXES: {v!r}")

    @field_validator("LOG_LEVEL", mode="before")
    def validate_log_level(cls, v: str) -> str:
        """Ensures the value is a valid logging level."""
        lvl = v.upper()
        if not isinstance(getLevelName(lvl), int):
            raise ValueError(f"Invalid LOG_LEVEL: {v!r}")
        return lvl

    @field_validator("RATE_LIMIT_WINDOW_SECONDS", "MAX_REQUESTS_PER_WINDOW", "DEFAULT_TOKEN_EXPIRATION_DAYS")
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
