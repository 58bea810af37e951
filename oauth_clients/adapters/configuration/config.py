# oauth_clients/adapters/configuration/config.py

import json
from typing import Annotated, Optional, List, Union
from logging import getLevelName
from pydantic import Field, PostgresDsn, field_validator, model_validator, ConfigDict
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"  # "development", "production", "testing"
    DEBUG: bool = False

    # Database
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "oauth"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[PostgresDsn] = Field(None, validate_default=True)
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Change subscription
    CLIENT_CHANGES_CHANNEL: str = "client_changes"
    WATCH_RETRY_MIN_SECONDS: float = 15.0
    WATCH_RETRY_MAX_SECONDS: float = 60.0
    WATCH_SHUTDOWN_TIMEOUT_SECONDS: float = 10.0

    # Secret hashing
    HASH_SCHEMES: Annotated[List[str], NoDecode] = ["bcrypt"]
    BCRYPT_ROUNDS: int = 12

    @field_validator("DATABASE_URL", mode="before")
    def assemble_db_url(cls, value, info):
        if value:
            return value

        data = info.data
        return PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=data["POSTGRES_USER"],
            password=data["POSTGRES_PASSWORD"],
            host=data["POSTGRES_HOST"],
            port=data["POSTGRES_PORT"],
            path=data["POSTGRES_DB"],
        )

    @field_validator("HASH_SCHEMES", mode="before")
    def assemble_hash_schemes(cls, v: Union[str, List[str]]) -> List[str]:
        """
        A CSV string (e.g. 'bcrypt,pbkdf2_sha256') or a JSON array becomes a list.
        A list is returned as is.
        """
        if isinstance(v, str) and v.startswith("["):
            return json.loads(v)
        if isinstance(v, str):
            return [scheme.strip() for scheme in v.split(",") if scheme.strip()]
        if isinstance(v, list):
            return v
        raise ValueError(f"Invalid HASH_SCHEMES: {v!r}")

    @field_validator("LOG_LEVEL", mode="before")
    def validate_log_level(cls, v: str) -> str:
        """Make sure the value is a valid logging level"""
        lvl = v.upper()
        if not isinstance(getLevelName(lvl), int):
            raise ValueError(f"Invalid LOG_LEVEL: {v!r}")
        return lvl

    @model_validator(mode="after")
    def validate_watch_retry(self) -> "Settings":
        if self.WATCH_RETRY_MIN_SECONDS < 0:
            raise ValueError("WATCH_RETRY_MIN_SECONDS must be non-negative")
        if self.WATCH_RETRY_MAX_SECONDS < self.WATCH_RETRY_MIN_SECONDS:
            raise ValueError("WATCH_RETRY_MAX_SECONDS must be >= WATCH_RETRY_MIN_SECONDS")
        return self

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
