"""fluentmail - compose MIME email with a chainable builder and send it."""

from fluentmail.__version__ import (
    __author__,
    __description__,
    __license__,
    __title__,
    __version__,
    get_version,
)
from fluentmail.builder import MessageBuilder, create_message
from fluentmail.common.exceptions import (
    ConfigError,
    DeliveryError,
    FluentMailError,
    IoError,
    TransportNotFoundError,
    UnknownConfigKeyError,
    ValidationError,
)
from fluentmail.mime import FileBytes, detect
from fluentmail.transports import (
    MemoryTransport,
    Transport,
    TransportRegistry,
    default_registry,
)

__all__ = [
    "__version__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
    "get_version",
    # Builder
    "MessageBuilder",
    "create_message",
    "FileBytes",
    "detect",
    # Transports
    "Transport",
    "MemoryTransport",
    "TransportRegistry",
    "default_registry",
    # Exceptions
    "FluentMailError",
    "ValidationError",
    "IoError",
    "ConfigError",
    "UnknownConfigKeyError",
    "TransportNotFoundError",
    "DeliveryError",
]
