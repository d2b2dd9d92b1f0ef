"""Configuration loading: TOML files, env var overrides, merge logic.

Discovery order (later overrides earlier):
    1. Built-in defaults (Pydantic model defaults)
    2. User config: ``~/.config/exa-mcp/config.toml``
    3. Project-local config: ``./exa-mcp.toml``
    4. ``$EXA_MCP_CONFIG`` environment variable (explicit path)
    5. Programmatic overrides (passed to ``load_config``)

Environment variable resolution:
    ``exa.api_key_env`` (default ``EXA_API_KEY``) and
    ``server.api_token_env`` (default ``API_TOKEN``) name env vars that
    fill ``api_key`` / ``api_token`` when a file did not set them.
    ``server.port_env`` (default ``PORT``) overrides the listen port.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from exa_mcp.core.errors import ConfigError

from .schema import ExaMcpConfig


def _user_config_path() -> Path:
    """Return XDG-compliant user config path."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "exa-mcp" / "config.toml"


def _project_config_path() -> Path:
    """Return project-local config path."""
    return Path.cwd() / "exa-mcp.toml"


def _discover_config_files() -> list[Path]:
    """Return config files in merge order (first = lowest priority)."""
    paths: list[Path] = []

    user = _user_config_path()
    if user.is_file():
        paths.append(user)

    project = _project_config_path()
    if project.is_file():
        paths.append(project)

    env_path = os.environ.get("EXA_MCP_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.is_file():
            msg = f"EXA_MCP_CONFIG points to non-existent file: {env_path}"
            raise ConfigError(msg)
        paths.append(p)

    return paths


def _read_toml(path: Path) -> dict[str, Any]:
    """Read and parse a TOML file."""
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Cannot read config file {path}: {e}"
        raise ConfigError(msg) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override wins on conflicts."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _resolve_env(config: ExaMcpConfig) -> None:
    """Fill credentials and port from environment variables (in-place)."""
    if config.exa.api_key is None and config.exa.api_key_env:
        config.exa.api_key = os.environ.get(config.exa.api_key_env) or None

    server = config.server
    if server.api_token is None and server.api_token_env:
        server.api_token = os.environ.get(server.api_token_env) or None

    raw_port = os.environ.get(server.port_env) if server.port_env else None
    if raw_port:
        try:
            server.port = int(raw_port)
        except ValueError as e:
            msg = f"{server.port_env} must be an integer, got: {raw_port!r}"
            raise ConfigError(msg) from e


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ExaMcpConfig:
    """Load and validate configuration.

    Args:
        path: Explicit config file path (highest file priority).
        overrides: Dict of overrides merged last (highest overall priority).

    Returns:
        Validated ExaMcpConfig instance.

    Raises:
        ConfigError: On invalid TOML, missing files, or validation failure.
    """
    merged: dict[str, Any] = {}

    files = _discover_config_files()

    if path is not None:
        p = Path(path)
        if not p.is_file():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg)
        files.append(p)

    for config_file in files:
        data = _read_toml(config_file)
        merged = _deep_merge(merged, data)

    if overrides:
        merged = _deep_merge(merged, overrides)

    try:
        config = ExaMcpConfig.model_validate(merged)
    except Exception as e:
        msg = f"Configuration validation failed: {e}"
        raise ConfigError(msg) from e

    _resolve_env(config)

    return config


def require_api_key(config: ExaMcpConfig) -> str:
    """Return the Exa API key, or raise ConfigError if none is configured."""
    if not config.exa.api_key:
        msg = f"{config.exa.api_key_env} environment variable is required"
        raise ConfigError(msg)
    return config.exa.api_key
