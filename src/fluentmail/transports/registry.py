"""
Transport lookup by moniker.

A TransportRegistry maps short names such as ``"smtp"`` to transport
factories. Builders are handed a registry explicitly; nothing here is
global. A moniker starting with ``=`` names a class by import path
(``"=mypackage.mail.QueueTransport"``) and bypasses the registry.
"""

import importlib
import logging
from typing import Any, Callable, Mapping, Optional

from ..common.exceptions import InvalidConfigError, TransportNotFoundError
from .base import Transport, is_transport
from .devnull import DevNullTransport
from .memory import MemoryTransport
from .printer import PrintTransport
from .sendmail import SendmailTransport
from .smtp import SMTPTransport

logger = logging.getLogger(__name__)

TransportFactory = Callable[..., Transport]


def _import_factory(path: str) -> TransportFactory:
    module_name, sep, attribute = path.replace(":", ".").rpartition(".")
    if not sep or not module_name or not attribute:
        raise TransportNotFoundError(f"={path}", "expected '=package.module.Class'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise TransportNotFoundError(f"={path}", str(e)) from e
    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise TransportNotFoundError(
            f"={path}", f"module '{module_name}' has no attribute '{attribute}'"
        ) from e


class TransportRegistry:
    """Case-insensitive mapping of moniker to transport factory."""

    def __init__(
        self, factories: Optional[Mapping[str, TransportFactory]] = None
    ) -> None:
        self._factories: dict[str, TransportFactory] = {}
        for name, factory in (factories or {}).items():
            self.register(name, factory)

    def register(self, name: str, factory: TransportFactory) -> None:
        """Register ``factory`` under ``name``, replacing any earlier entry."""
        key = name.strip().lower()
        if not key or key.startswith("="):
            raise InvalidConfigError("transport", name, "invalid transport name")
        self._factories[key] = factory

    def names(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._factories

    def resolve(
        self, moniker: str, options: Optional[Mapping[str, Any]] = None
    ) -> Transport:
        """
        Construct the transport a moniker names.

        Args:
            moniker: Registered name, or ``=`` followed by an import path.
            options: Keyword arguments for the transport constructor.

        Returns:
            A new transport instance.

        Raises:
            TransportNotFoundError: If the moniker cannot be resolved.
            InvalidConfigError: If the options are rejected.
        """
        if not isinstance(moniker, str) or not moniker.strip():
            raise TransportNotFoundError(str(moniker), "empty transport name")

        moniker = moniker.strip()
        if moniker.startswith("="):
            factory = _import_factory(moniker[1:])
        else:
            factory = self._factories.get(moniker.lower())
            if factory is None:
                raise TransportNotFoundError(
                    moniker, f"known transports: {', '.join(self.names())}"
                )

        try:
            transport = factory(**dict(options or {}))
        except TypeError as e:
            raise InvalidConfigError(
                config_key=f"transport.{moniker}",
                value=dict(options or {}),
                reason=str(e),
            ) from e

        if not is_transport(transport):
            raise TransportNotFoundError(moniker, "factory did not produce a transport")

        logger.debug("Resolved transport %s to %s", moniker, type(transport).__name__)
        return transport


def default_registry() -> TransportRegistry:
    """Return a new registry holding the built-in transports."""
    return TransportRegistry(
        {
            "test": MemoryTransport,
            "memory": MemoryTransport,
            "devnull": DevNullTransport,
            "print": PrintTransport,
            "sendmail": SendmailTransport,
            "smtp": SMTPTransport,
        }
    )
