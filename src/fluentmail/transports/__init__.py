"""
Delivery transports for fluentmail.

This module provides the transport base class, the moniker registry and
the built-in transports (in-memory, discard, print, sendmail and SMTP).
"""

from .base import Envelope, Transport, is_transport
from .devnull import DevNullTransport
from .memory import Delivery, MemoryTransport
from .printer import PrintTransport
from .registry import TransportFactory, TransportRegistry, default_registry
from .sendmail import SendmailTransport
from .smtp import SMTPTransport

__all__ = [
    # Base classes
    "Envelope",
    "Transport",
    "is_transport",
    # Registry
    "TransportFactory",
    "TransportRegistry",
    "default_registry",
    # Transports
    "Delivery",
    "DevNullTransport",
    "MemoryTransport",
    "PrintTransport",
    "SendmailTransport",
    "SMTPTransport",
]
