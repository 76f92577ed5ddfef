"""Configuration management for dropins-manager."""

from .config import DEFAULT_PROFILE, Config, ConfigData, ConfigError

__all__ = ["DEFAULT_PROFILE", "Config", "ConfigData", "ConfigError"]
