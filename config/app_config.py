"""Explicit configuration object for the dashboard backend

The configuration is read once at process start by load_config() and passed by
reference into the components that need it.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from settings import DEFAULT_REDIRECT_URI, DEFAULT_SESSION_SECRET
from .loader import ConfigLoader

logger = logging.getLogger(__name__)

REQUIRED_VARIABLES = ("DISCORD_CLIENT_ID", "DISCORD_CLIENT_SECRET", "DISCORD_BOT_TOKEN")

SESSION_BACKENDS = ("memory", "file")


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid"""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = missing or []


@dataclass(frozen=True)
class DashboardConfig:
    """Process-wide configuration

    Attributes:
        client_id: Discord application client ID
        client_secret: Discord application client secret
        bot_token: Bot token, never exposed to the frontend
        session_secret: Key used to sign the session cookie
        redirect_uri: OAuth2 redirect URI registered with Discord
        port: HTTP port for the dashboard server
        bind_address: Interface the server binds to
        log_level: uvicorn/root log level name
        connect_timeout: Seconds allowed to establish an upstream connection
        request_timeout: Seconds allowed per read, write or pool wait of an upstream request
        session_ttl_seconds: Lifetime of a session record and its cookie
        session_backend: "memory" or "file"
        session_dir: Directory used by the file session backend
        cookie_secure: Mark the session cookie Secure (HTTPS deployments)
        probe_concurrency: Max concurrent bot-installation probes per request
        static_dir: Directory holding the frontend files
    """
    client_id: str
    client_secret: str
    bot_token: str
    session_secret: str = DEFAULT_SESSION_SECRET
    redirect_uri: str = DEFAULT_REDIRECT_URI
    port: int = 3000
    bind_address: str = "0.0.0.0"
    log_level: str = "info"
    connect_timeout: float = 10.0
    request_timeout: float = 30.0
    session_ttl_seconds: int = 24 * 60 * 60
    session_backend: str = "memory"
    session_dir: str = "~/.chatpulse/sessions"
    cookie_secure: bool = False
    probe_concurrency: int = 5
    static_dir: str = "public"
    insecure_defaults: Tuple[str, ...] = ()

    @classmethod
    def from_loader(cls, loader: ConfigLoader) -> "DashboardConfig":
        """Build the configuration from a ConfigLoader

        Raises:
            ConfigError: If a required variable is missing or a value is invalid
        """
        missing = [name for name in REQUIRED_VARIABLES if loader.get_required(name) is None]
        if missing:
            raise ConfigError(
                f"Missing one or more required Discord env vars: {', '.join(missing)}",
                missing=missing,
            )

        insecure_defaults = []
        if not loader.is_set("SESSION_SECRET"):
            insecure_defaults.append("SESSION_SECRET")
        if not loader.is_set("REDIRECT_URI"):
            insecure_defaults.append("REDIRECT_URI")

        session_backend = str(loader.get("SESSION_BACKEND", "memory")).lower()
        if session_backend not in SESSION_BACKENDS:
            raise ConfigError(
                f"SESSION_BACKEND must be one of {', '.join(SESSION_BACKENDS)}, got {session_backend!r}"
            )

        probe_concurrency = loader.get("PROBE_CONCURRENCY", 5)
        if probe_concurrency < 1:
            raise ConfigError(f"PROBE_CONCURRENCY must be at least 1, got {probe_concurrency}")

        session_ttl = loader.get("SESSION_TTL_SECONDS", 24 * 60 * 60)
        if session_ttl < 1:
            raise ConfigError(f"SESSION_TTL_SECONDS must be positive, got {session_ttl}")

        return cls(
            client_id=loader.get_required("DISCORD_CLIENT_ID"),
            client_secret=loader.get_required("DISCORD_CLIENT_SECRET"),
            bot_token=loader.get_required("DISCORD_BOT_TOKEN"),
            session_secret=loader.get("SESSION_SECRET", DEFAULT_SESSION_SECRET),
            redirect_uri=loader.get("REDIRECT_URI", DEFAULT_REDIRECT_URI),
            port=loader.get("PORT", 3000),
            bind_address=loader.get("BIND_ADDRESS", "0.0.0.0"),
            log_level=str(loader.get("LOG_LEVEL", "info")).lower(),
            connect_timeout=loader.get("CONNECT_TIMEOUT", 10.0),
            request_timeout=loader.get("REQUEST_TIMEOUT", 30.0),
            session_ttl_seconds=session_ttl,
            session_backend=session_backend,
            session_dir=loader.get("SESSION_DIR", "~/.chatpulse/sessions"),
            cookie_secure=loader.get("COOKIE_SECURE", False),
            probe_concurrency=probe_concurrency,
            static_dir=loader.get("STATIC_DIR", "public"),
            insecure_defaults=tuple(insecure_defaults),
        )

    def warn_insecure_defaults(self):
        """Log a warning for every setting that fell back to a development default"""
        for name in self.insecure_defaults:
            logger.warning(f"[Config] {name} is not set, using an insecure development default")


def load_config(env_path: Optional[str] = None) -> DashboardConfig:
    """Load the dashboard configuration from the environment and .env file

    Args:
        env_path: Optional path to the .env file

    Returns:
        DashboardConfig instance

    Raises:
        ConfigError: If required configuration is missing
    """
    config = DashboardConfig.from_loader(ConfigLoader(env_path))
    config.warn_insecure_defaults()
    return config
