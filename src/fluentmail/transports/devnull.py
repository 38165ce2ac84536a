"""Transport that accepts every message and discards it."""

import logging
from email.message import Message

from .base import Envelope, Transport

logger = logging.getLogger(__name__)


class DevNullTransport(Transport):
    """Discard messages."""

    def deliver(self, message: Message, envelope: Envelope) -> None:
        logger.debug("Discarding message for %s", ", ".join(envelope.recipients))
