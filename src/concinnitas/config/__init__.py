"""
Configuration module for concinnitas.

Exports the main components for convenient imports.
"""

from .loader import load_config
from .schema import AppConfig, LoggingConfig, RegistryConfig

__all__ = [
    "load_config",
    "AppConfig",
    "LoggingConfig",
    "RegistryConfig",
]
