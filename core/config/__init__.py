"""
Runtime Configuration Module

Provides configuration loading and management for merklefs.
"""

from .runtime import (
    ENV_PREFIX,
    ClientConfig,
    RuntimeConfig,
    ServerConfig,
    get_default_config_template,
    load_runtime_config,
)

__all__ = [
    "ENV_PREFIX",
    "ClientConfig",
    "RuntimeConfig",
    "ServerConfig",
    "get_default_config_template",
    "load_runtime_config",
]
