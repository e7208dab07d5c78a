"""
Runtime Configuration Module

Provides configuration loading and management for jsonwire clients.
"""

from .runtime import ClientConfig, HttpConfig, get_default_config, set_default_config

__all__ = [
    "ClientConfig",
    "HttpConfig",
    "get_default_config",
    "set_default_config",
]
