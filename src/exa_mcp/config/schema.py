"""Pydantic models for exa-mcp configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ExaConfig(BaseModel):
    """Upstream Exa search API settings."""

    api_key: str | None = None
    api_key_env: str = "EXA_API_KEY"
    base_url: str = "https://api.exa.ai"
    search_path: str = "/search"
    max_characters: int = Field(default=3000, gt=0)
    # None waits indefinitely; 0 retries keeps single-shot calls.
    timeout: float | None = Field(default=None, gt=0)
    max_retries: int = Field(default=0, ge=0)
    retry_base_delay: float = Field(default=1.0, gt=0)
    retry_max_delay: float = Field(default=30.0, gt=0)


class ServerConfig(BaseModel):
    """Network transport settings (``--sse`` mode)."""

    host: str = "0.0.0.0"
    port: int = 3000
    port_env: str = "PORT"
    api_token: str | None = None
    api_token_env: str = "API_TOKEN"
    sse_path: str = "/sse"
    messages_path: str = "/messages"
    ping_interval: float = Field(default=15.0, gt=0)


class ToolsConfig(BaseModel):
    """Tool exposure settings."""

    allow: list[str] | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""


class ExaMcpConfig(BaseModel):
    """Top-level configuration for exa-mcp."""

    exa: ExaConfig = Field(default_factory=ExaConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
