"""
Transport that writes messages to a text stream.

Useful for debugging: the envelope is printed followed by the wire form
of the message.
"""

import sys
from email.message import Message
from typing import Optional, TextIO

from ..common.exceptions import DeliveryError
from .base import Envelope, Transport


class PrintTransport(Transport):
    """Write each message to ``stream`` (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream

    def deliver(self, message: Message, envelope: Envelope) -> None:
        stream = self.stream or sys.stdout
        try:
            stream.write(f"ENVELOPE TO  : {', '.join(envelope.recipients)}\n")
            stream.write(f"ENVELOPE FROM: {envelope.sender}\n")
            stream.write("---------- begin message\n")
            stream.write(message.as_string())
            stream.write("\n---------- end message\n")
        except (OSError, ValueError) as e:
            raise DeliveryError(", ".join(envelope.recipients), str(e)) from e
