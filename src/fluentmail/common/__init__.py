"""
Shared infrastructure for fluentmail: exceptions and settings.
"""

from .config import Settings, TransportSettings, get_settings, reload_settings
from .exceptions import (
    ConfigError,
    DeliveryError,
    FluentMailError,
    InvalidConfigError,
    IoError,
    MissingConfigError,
    TransportNotFoundError,
    UnknownConfigKeyError,
    ValidationError,
)

__all__ = [
    # Exceptions
    "FluentMailError",
    "ValidationError",
    "IoError",
    "ConfigError",
    "UnknownConfigKeyError",
    "TransportNotFoundError",
    "MissingConfigError",
    "InvalidConfigError",
    "DeliveryError",
    # Settings
    "Settings",
    "TransportSettings",
    "get_settings",
    "reload_settings",
]
