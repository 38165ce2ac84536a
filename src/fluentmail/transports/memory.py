"""
In-memory transport.

Keeps every delivered message so tests can inspect what would have been
sent. Can be told to refuse deliveries to exercise failure paths.
"""

import logging
from dataclasses import dataclass
from email.message import Message

from ..common.exceptions import DeliveryError
from .base import Envelope, Transport

logger = logging.getLogger(__name__)


@dataclass
class Delivery:
    """A message captured by MemoryTransport."""

    message: Message
    envelope: Envelope


class MemoryTransport(Transport):
    """Transport that records deliveries instead of sending them."""

    def __init__(self, fail: bool = False, reason: str = "delivery refused") -> None:
        self.fail = fail
        self.reason = reason
        self.deliveries: list[Delivery] = []

    def deliver(self, message: Message, envelope: Envelope) -> None:
        if self.fail:
            raise DeliveryError(", ".join(envelope.recipients), self.reason)
        self.deliveries.append(Delivery(message=message, envelope=envelope))
        logger.debug("Captured delivery #%d", len(self.deliveries))

    def clear(self) -> None:
        self.deliveries.clear()
