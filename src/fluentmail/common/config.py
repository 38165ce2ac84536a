"""
Configuration management for fluentmail.

This module provides configuration loading from environment variables
and configuration files, with type-safe settings classes. The settings
only matter when a message is sent without an explicitly configured
transport.
"""

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import InvalidConfigError, MissingConfigError


class TransportSettings(BaseSettings):
    """Default transport configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLUENTMAIL_TRANSPORT_",
        extra="ignore",
    )

    name: str = Field(default="sendmail", description="Default transport moniker")
    sendmail_path: str = Field(
        default="/usr/sbin/sendmail", description="Path to the sendmail binary"
    )
    smtp_host: str = Field(default="localhost", description="SMTP server host")
    smtp_port: int = Field(default=25, ge=1, le=65535, description="SMTP server port")
    smtp_username: Optional[str] = Field(None, description="SMTP login user")
    smtp_password: Optional[str] = Field(None, description="SMTP login password")
    smtp_use_tls: bool = Field(
        default=False, description="Connect with implicit TLS (port 465)"
    )
    smtp_start_tls: Optional[bool] = Field(
        default=None,
        description="Force STARTTLS on/off; None upgrades when offered",
    )
    timeout: float = Field(default=60.0, gt=0, description="Delivery timeout in seconds")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank transport monikers."""
        if not v.strip():
            raise ValueError("Transport name must not be empty")
        return v.strip()

    def transport_options(self) -> dict[str, Any]:
        """
        Build constructor options for the configured transport.

        Returns:
            Keyword arguments for the transport named by ``name``.
        """
        moniker = self.name.lower()
        if moniker == "sendmail":
            return {"path": self.sendmail_path}
        if moniker == "smtp":
            return {
                "host": self.smtp_host,
                "port": self.smtp_port,
                "username": self.smtp_username,
                "password": self.smtp_password,
                "use_tls": self.smtp_use_tls,
                "start_tls": self.smtp_start_tls,
                "timeout": self.timeout,
            }
        return {}


class Settings(BaseSettings):
    """Main settings aggregating all configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FLUENTMAIL_",
        extra="ignore",
    )

    transport: TransportSettings = Field(default_factory=TransportSettings)

    @classmethod
    def from_toml(cls, path: str | Path) -> "Settings":
        """
        Load settings from a TOML configuration file.

        Args:
            path: Path to the TOML configuration file.

        Returns:
            Settings instance with loaded configuration.

        Raises:
            MissingConfigError: If the file does not exist.
            InvalidConfigError: If the file cannot be parsed.
        """
        path = Path(path)
        if not path.exists():
            raise MissingConfigError(str(path))

        try:
            with open(path, "rb") as f:
                config_data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise InvalidConfigError(
                config_key="config_file",
                value=str(path),
                reason=f"Failed to parse TOML: {e}",
            )

        return cls._from_dict(config_data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Settings":
        """
        Create settings from a dictionary.

        Args:
            data: Configuration dictionary.

        Returns:
            Settings instance.
        """
        settings_kwargs: dict[str, Any] = {}

        if "transport" in data:
            settings_kwargs["transport"] = TransportSettings(**data["transport"])

        return cls(**settings_kwargs)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings.

    Settings are loaded from the TOML file named by
    ``FLUENTMAIL_CONFIG_FILE`` when it exists, otherwise from
    environment variables. The result is cached.

    Returns:
        Settings instance.
    """
    config_file = os.getenv("FLUENTMAIL_CONFIG_FILE")

    if config_file and Path(config_file).exists():
        settings = Settings.from_toml(config_file)
    else:
        settings = Settings()

    return settings


def reload_settings() -> Settings:
    """
    Reload settings, clearing the cache.

    Returns:
        Fresh Settings instance.
    """
    get_settings.cache_clear()
    return get_settings()
