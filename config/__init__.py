"""Configuration management package for the ChatPulse dashboard"""

from .loader import ConfigLoader
from .app_config import ConfigError, DashboardConfig, load_config

__all__ = [
    "ConfigLoader",
    "ConfigError",
    "DashboardConfig",
    "load_config",
]
