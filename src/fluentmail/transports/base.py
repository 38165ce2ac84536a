"""
Transport base class for fluentmail.

A transport receives a fully assembled message and delivers it somewhere.
Subclasses implement ``deliver``; envelope derivation, Bcc stripping and
the raising/non-raising send variants live here.
"""

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from email.message import Message
from email.utils import getaddresses
from typing import Any, Iterable, Mapping, Optional, Union

from ..common.exceptions import DeliveryError

logger = logging.getLogger(__name__)

RECIPIENT_HEADERS = ("To", "Cc", "Bcc")


@dataclass
class Envelope:
    """SMTP envelope for a single delivery."""

    sender: str
    recipients: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"from": self.sender, "to": list(self.recipients)}


def _addresses(values: Iterable[Any]) -> list[str]:
    return [addr for _, addr in getaddresses([str(v) for v in values]) if addr]


def _as_list(value: Union[str, Iterable[str], None]) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def is_transport(obj: Any) -> bool:
    """Check whether ``obj`` offers the send/try_send transport contract."""
    if isinstance(obj, type):
        return False
    return callable(getattr(obj, "send", None)) and callable(
        getattr(obj, "try_send", None)
    )


class Transport(ABC):
    """Base class for all delivery mechanisms."""

    def envelope_for(
        self, message: Message, options: Optional[Mapping[str, Any]] = None
    ) -> Envelope:
        """
        Work out the envelope for a message.

        The ``from`` and ``to`` options take precedence over the From,
        To, Cc and Bcc headers.

        Raises:
            DeliveryError: If there is no sender or no recipient.
        """
        options = options or {}

        senders = _addresses(_as_list(options.get("from"))) or _addresses(
            message.get_all("From", [])
        )
        recipients = _addresses(_as_list(options.get("to")))
        if not recipients:
            for header in RECIPIENT_HEADERS:
                recipients.extend(_addresses(message.get_all(header, [])))

        if not recipients:
            raise DeliveryError("(none)", "no recipients")
        if not senders:
            raise DeliveryError(", ".join(recipients), "no envelope sender")

        return Envelope(sender=senders[0], recipients=recipients)

    @abstractmethod
    def deliver(self, message: Message, envelope: Envelope) -> None:
        """
        Hand the message to the delivery mechanism.

        Raises:
            DeliveryError: If delivery fails.
        """

    def send(
        self, message: Message, options: Optional[Mapping[str, Any]] = None
    ) -> None:
        """
        Deliver a message, raising on failure.

        Args:
            message: The assembled message. It is not modified.
            options: Optional ``from``/``to`` envelope overrides.

        Raises:
            DeliveryError: If delivery fails.
        """
        envelope = self.envelope_for(message, options)

        outgoing = copy.deepcopy(message)
        del outgoing["Bcc"]

        logger.info(
            "Sending message via %s from %s to %d recipients",
            type(self).__name__,
            envelope.sender,
            len(envelope.recipients),
        )
        self.deliver(outgoing, envelope)

    def try_send(
        self, message: Message, options: Optional[Mapping[str, Any]] = None
    ) -> bool:
        """
        Deliver a message without raising on failure.

        Returns:
            True if the message was delivered, False otherwise.
        """
        try:
            self.send(message, options)
        except DeliveryError as e:
            logger.warning("Delivery via %s failed: %s", type(self).__name__, e)
            return False
        return True
