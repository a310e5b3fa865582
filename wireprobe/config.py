"""
Configuration settings for wireprobe.

Uses Pydantic Settings to load environment variables for the listener,
the per-connection handler, the diagnostic client and logging. Every value
has a default matching the classic setup (all interfaces, port 9090), so the
server runs with no environment at all.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Listener
    server_host: str = Field("0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(9090, alias="SERVER_PORT", ge=0, le=65535)
    server_backlog: int = Field(128, alias="SERVER_BACKLOG", gt=0)
    server_dispatch: str = Field("thread", alias="SERVER_DISPATCH")
    accept_poll_interval: float = Field(0.5, alias="ACCEPT_POLL_INTERVAL", gt=0)

    # Connection handler
    connection_timeout: Optional[float] = Field(None, alias="CONNECTION_TIMEOUT")
    strict_decode: bool = Field(False, alias="STRICT_DECODE")

    # Client
    client_host: str = Field("127.0.0.1", alias="CLIENT_HOST")
    client_port: int = Field(9090, alias="CLIENT_PORT", ge=1, le=65535)
    client_timeout: Optional[float] = Field(5.0, alias="CLIENT_TIMEOUT")
    client_connect_attempts: int = Field(3, alias="CLIENT_CONNECT_ATTEMPTS", ge=1)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
