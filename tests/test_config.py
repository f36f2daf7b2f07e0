"""Tests for configuration loading and validation."""

import pytest

from config import ConfigError, ConfigLoader, DashboardConfig, load_config
from settings import DEFAULT_REDIRECT_URI, DEFAULT_SESSION_SECRET

ALL_VARIABLES = (
    "DISCORD_CLIENT_ID",
    "DISCORD_CLIENT_SECRET",
    "DISCORD_BOT_TOKEN",
    "SESSION_SECRET",
    "REDIRECT_URI",
    "PORT",
    "BIND_ADDRESS",
    "LOG_LEVEL",
    "CONNECT_TIMEOUT",
    "REQUEST_TIMEOUT",
    "SESSION_TTL_SECONDS",
    "SESSION_BACKEND",
    "SESSION_DIR",
    "COOKIE_SECURE",
    "PROBE_CONCURRENCY",
    "STATIC_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ALL_VARIABLES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def required_env(monkeypatch):
    monkeypatch.setenv("DISCORD_CLIENT_ID", "client-123")
    monkeypatch.setenv("DISCORD_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "bot-token")


def _loader():
    return ConfigLoader(load_env_file=False)


class TestConfigLoader:
    def test_env_overrides_default(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        assert _loader().get("PORT", 3000) == 8080

    def test_empty_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("PORT", "")
        assert _loader().get("PORT", 3000) == 3000

    def test_unparseable_int_uses_default(self, monkeypatch):
        monkeypatch.setenv("PORT", "eighty")
        assert _loader().get("PORT", 3000) == 3000

    def test_bool_parsing(self, monkeypatch):
        monkeypatch.setenv("COOKIE_SECURE", "yes")
        assert _loader().get("COOKIE_SECURE", False) is True
        monkeypatch.setenv("COOKIE_SECURE", "off")
        assert _loader().get("COOKIE_SECURE", False) is False

    def test_float_parsing(self, monkeypatch):
        monkeypatch.setenv("REQUEST_TIMEOUT", "2.5")
        assert _loader().get("REQUEST_TIMEOUT", 30.0) == 2.5

    def test_blank_required_value_is_missing(self, monkeypatch):
        monkeypatch.setenv("DISCORD_BOT_TOKEN", "   ")
        assert _loader().get_required("DISCORD_BOT_TOKEN") is None

    def test_env_file_is_loaded(self, tmp_path, monkeypatch):
        # Register the variable with monkeypatch so the value dotenv writes is undone
        monkeypatch.setenv("DISCORD_CLIENT_ID", "placeholder")
        monkeypatch.delenv("DISCORD_CLIENT_ID")
        env_file = tmp_path / ".env"
        env_file.write_text("DISCORD_CLIENT_ID=from-dotenv\n")
        loader = ConfigLoader(env_path=str(env_file))
        assert loader.get_required("DISCORD_CLIENT_ID") == "from-dotenv"

    def test_environment_wins_over_env_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DISCORD_CLIENT_ID", "from-environment")
        env_file = tmp_path / ".env"
        env_file.write_text("DISCORD_CLIENT_ID=from-dotenv\n")
        loader = ConfigLoader(env_path=str(env_file))
        assert loader.get_required("DISCORD_CLIENT_ID") == "from-environment"


class TestDashboardConfig:
    def test_missing_required_variables(self, monkeypatch):
        monkeypatch.setenv("DISCORD_CLIENT_ID", "client-123")
        with pytest.raises(ConfigError) as exc_info:
            DashboardConfig.from_loader(_loader())
        assert exc_info.value.missing == ["DISCORD_CLIENT_SECRET", "DISCORD_BOT_TOKEN"]
        assert "DISCORD_BOT_TOKEN" in str(exc_info.value)

    def test_defaults(self, required_env):
        config = DashboardConfig.from_loader(_loader())
        assert config.port == 3000
        assert config.session_secret == DEFAULT_SESSION_SECRET
        assert config.redirect_uri == DEFAULT_REDIRECT_URI
        assert config.session_backend == "memory"
        assert config.probe_concurrency == 5
        assert config.connect_timeout == 10.0
        assert config.request_timeout == 30.0
        assert set(config.insecure_defaults) == {"SESSION_SECRET", "REDIRECT_URI"}

    def test_explicit_values(self, required_env, monkeypatch):
        monkeypatch.setenv("SESSION_SECRET", "s3cret")
        monkeypatch.setenv("REDIRECT_URI", "https://chatpulse.example/callback")
        monkeypatch.setenv("SESSION_BACKEND", "FILE")
        monkeypatch.setenv("PROBE_CONCURRENCY", "2")
        config = DashboardConfig.from_loader(_loader())
        assert config.session_secret == "s3cret"
        assert config.redirect_uri == "https://chatpulse.example/callback"
        assert config.session_backend == "file"
        assert config.probe_concurrency == 2
        assert config.insecure_defaults == ()

    def test_unknown_session_backend(self, required_env, monkeypatch):
        monkeypatch.setenv("SESSION_BACKEND", "redis")
        with pytest.raises(ConfigError):
            DashboardConfig.from_loader(_loader())

    def test_install_concurrency_must_be_positive(self, required_env, monkeypatch):
        monkeypatch.setenv("PROBE_CONCURRENCY", "0")
        with pytest.raises(ConfigError):
            DashboardConfig.from_loader(_loader())

    def test_config_is_frozen(self, required_env):
        config = DashboardConfig.from_loader(_loader())
        with pytest.raises(AttributeError):
            config.bot_token = "other"

    def test_load_config_warns_about_insecure_defaults(self, required_env, tmp_path, caplog):
        with caplog.at_level("WARNING"):
            load_config(str(tmp_path / "missing.env"))
        assert "SESSION_SECRET" in caplog.text
        assert "REDIRECT_URI" in caplog.text
