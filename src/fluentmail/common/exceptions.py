"""
Custom exceptions for fluentmail.

This module defines all custom exceptions raised by the message builder,
the MIME assembler and the transports.
"""

from typing import Any, Iterable, Optional


class FluentMailError(Exception):
    """Base exception for all fluentmail errors."""

    def __init__(self, message: str,
                 details: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


# Validation Exceptions
class ValidationError(FluentMailError):
    """Raised when a builder call violates its contract."""

    def __init__(
        self,
        field: str,
        value: Any,
        reason: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            field: The field that failed validation.
            value: The invalid value.
            reason: The reason for validation failure.
            details: Optional dictionary with additional error details.
        """
        super().__init__(f"Validation failed for '{field}': {reason}", details)
        self.field = field
        self.value = value
        self.reason = reason


# I/O Exceptions
class IoError(FluentMailError):
    """Raised when an attachment file is missing or cannot be read."""

    def __init__(
        self,
        path: str,
        reason: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"Cannot read attachment '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, details)
        self.path = path
        self.reason = reason


# Configuration Exceptions
class ConfigError(FluentMailError):
    """Base exception for configuration-related errors."""


class UnknownConfigKeyError(ConfigError):
    """Raised when a construction mapping carries unrecognized keys."""

    def __init__(
        self, keys: Iterable[str], details: Optional[dict[str, Any]] = None
    ) -> None:
        """
        Initialize unknown config key error.

        Args:
            keys: The offending keys.
            details: Optional dictionary with additional error details.
        """
        self.keys = sorted(keys)
        super().__init__(
            f"Illegal arguments to create_message: {', '.join(self.keys)}",
            details,
        )


class TransportNotFoundError(ConfigError):
    """Raised when a transport moniker cannot be resolved."""

    def __init__(
        self,
        moniker: str,
        reason: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"Cannot resolve transport '{moniker}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, details)
        self.moniker = moniker
        self.reason = reason


class MissingConfigError(ConfigError):
    """Raised when a required configuration value is missing."""

    def __init__(
        self, config_key: str, details: Optional[dict[str, Any]] = None
    ) -> None:
        """
        Initialize missing config error.

        Args:
            config_key: The missing configuration key.
            details: Optional dictionary with additional error details.
        """
        super().__init__(
            f"Missing required configuration: '{config_key}'", details)
        self.config_key = config_key


class InvalidConfigError(ConfigError):
    """Raised when a configuration value is invalid."""

    def __init__(
        self,
        config_key: str,
        value: Any,
        reason: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize invalid config error.

        Args:
            config_key: The configuration key with invalid value.
            value: The invalid value.
            reason: Optional reason why the value is invalid.
            details: Optional dictionary with additional error details.
        """
        message = f"Invalid configuration value for '{config_key}': {value}"
        if reason:
            message += f" - {reason}"
        super().__init__(message, details)
        self.config_key = config_key
        self.value = value
        self.reason = reason


# Delivery Exceptions
class DeliveryError(FluentMailError):
    """Raised when a transport fails to deliver a message."""

    def __init__(
        self,
        recipient: str,
        reason: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize delivery error.

        Args:
            recipient: The intended recipient(s) of the message.
            reason: Optional reason for delivery failure.
            details: Optional dictionary with additional error details.
        """
        message = f"Failed to deliver message to '{recipient}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, details)
        self.recipient = recipient
        self.reason = reason
