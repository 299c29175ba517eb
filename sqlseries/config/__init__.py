"""Configuration loading for sqlseries."""

from .settings import ConfigurationError, FormattingConfig, ServerConfig, Settings, load_settings

__all__ = ["ConfigurationError", "FormattingConfig", "ServerConfig", "Settings", "load_settings"]
