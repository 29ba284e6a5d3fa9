"""
Config Module - Black Box Interface

Purpose: Application configuration management
Interface: ConfigProvider protocol, EnvConfigProvider, get_config()
Hidden: Config sources, environment parsing

Can be replaced with different config systems without affecting commands.
"""

from .provider import (
    AzureConfig,
    ConfigProvider,
    CredentialsConfig,
    EnvConfigProvider,
    ExecutorConfig,
    TelemetryConfig,
)

# Singleton instance
_instance = None


def get_config() -> ConfigProvider:
    """Get the configuration provider singleton."""
    global _instance
    if _instance is None:
        _instance = EnvConfigProvider()
    return _instance


__all__ = [
    "AzureConfig",
    "ConfigProvider",
    "CredentialsConfig",
    "EnvConfigProvider",
    "ExecutorConfig",
    "TelemetryConfig",
    "get_config",
]
