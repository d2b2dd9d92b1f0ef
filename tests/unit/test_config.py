"""Tests for configuration schema and loader."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from exa_mcp.config.loader import _deep_merge, load_config, require_api_key
from exa_mcp.config.schema import ExaMcpConfig
from exa_mcp.core.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

# ── Schema ───────────────────────────────────────────────────────


class TestSchemaDefaults:
    def test_exa_defaults(self):
        cfg = ExaMcpConfig()
        assert cfg.exa.api_key is None
        assert cfg.exa.base_url == "https://api.exa.ai"
        assert cfg.exa.max_characters == 3000
        assert cfg.exa.timeout is None
        assert cfg.exa.max_retries == 0
        assert cfg.exa.retry_base_delay == 1.0
        assert cfg.exa.retry_max_delay == 30.0

    def test_server_defaults(self):
        cfg = ExaMcpConfig()
        assert cfg.server.port == 3000
        assert cfg.server.sse_path == "/sse"
        assert cfg.server.messages_path == "/messages"
        assert cfg.server.api_token is None

    def test_tools_allow_defaults_to_none(self):
        assert ExaMcpConfig().tools.allow is None


# ── _deep_merge ──────────────────────────────────────────────────


class TestDeepMerge:
    def test_nested_override(self):
        base = {"exa": {"max_characters": 3000, "base_url": "a"}}
        merged = _deep_merge(base, {"exa": {"max_characters": 500}})
        assert merged == {"exa": {"max_characters": 500, "base_url": "a"}}

    def test_base_not_mutated(self):
        base = {"server": {"port": 1}}
        _deep_merge(base, {"server": {"port": 2}})
        assert base == {"server": {"port": 1}}


# ── load_config ──────────────────────────────────────────────────


class TestLoadConfig:
    def test_defaults_without_files(self):
        cfg = load_config()
        assert cfg.server.port == 3000

    def test_explicit_path(self, tmp_path: Path):
        path = tmp_path / "custom.toml"
        path.write_text('[exa]\nmax_characters = 1200\n[tools]\nallow = ["web_search"]\n')
        cfg = load_config(path=path)
        assert cfg.exa.max_characters == 1200
        assert cfg.tools.allow == ["web_search"]

    def test_project_file_discovered(self, tmp_path: Path):
        (tmp_path / "exa-mcp.toml").write_text("[server]\nport = 8123\n")
        assert load_config().server.port == 8123

    def test_user_file_below_project_file(self, tmp_path: Path):
        user_dir = tmp_path / "exa-mcp"
        user_dir.mkdir()
        (user_dir / "config.toml").write_text(
            '[server]\nport = 1111\nhost = "127.0.0.1"\n'
        )
        (tmp_path / "exa-mcp.toml").write_text("[server]\nport = 2222\n")
        cfg = load_config()
        assert cfg.server.port == 2222
        assert cfg.server.host == "127.0.0.1"

    def test_overrides_win(self, tmp_path: Path):
        (tmp_path / "exa-mcp.toml").write_text('[tools]\nallow = ["twitter_search"]\n')
        cfg = load_config(overrides={"tools": {"allow": ["web_search"]}})
        assert cfg.tools.allow == ["web_search"]

    def test_missing_explicit_path(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(path=tmp_path / "nope.toml")

    def test_env_config_must_exist(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("EXA_MCP_CONFIG", "/does/not/exist.toml")
        with pytest.raises(ConfigError, match="non-existent"):
            load_config()

    def test_invalid_toml(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("[exa\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path=path)

    def test_validation_failure(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("[exa]\nmax_characters = 0\n")
        with pytest.raises(ConfigError, match="validation failed"):
            load_config(path=path)


# ── Environment resolution ───────────────────────────────────────


class TestEnvResolution:
    def test_api_key_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("EXA_API_KEY", "exa-secret")
        assert load_config().exa.api_key == "exa-secret"

    def test_empty_api_key_is_none(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("EXA_API_KEY", "")
        assert load_config().exa.api_key is None

    def test_file_key_beats_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("EXA_API_KEY", "from-env")
        path = tmp_path / "c.toml"
        path.write_text('[exa]\napi_key = "from-file"\n')
        assert load_config(path=path).exa.api_key == "from-file"

    def test_custom_key_env_name(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("MY_EXA_KEY", "k")
        path = tmp_path / "c.toml"
        path.write_text('[exa]\napi_key_env = "MY_EXA_KEY"\n')
        assert load_config(path=path).exa.api_key == "k"

    def test_api_token_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("API_TOKEN", "t0ken")
        assert load_config().server.api_token == "t0ken"

    def test_port_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PORT", "8080")
        assert load_config().server.port == 8080

    def test_non_integer_port(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PORT", "eighty")
        with pytest.raises(ConfigError, match="PORT must be an integer"):
            load_config()


class TestRequireApiKey:
    def test_returns_key(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("EXA_API_KEY", "abc")
        assert require_api_key(load_config()) == "abc"

    def test_missing_key(self):
        with pytest.raises(ConfigError, match="EXA_API_KEY environment variable is required"):
            require_api_key(load_config())
