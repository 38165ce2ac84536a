"""
Sendmail transport.

Pipes the message to a local sendmail-compatible binary with the
envelope passed on the command line.
"""

import logging
import subprocess
from email.message import Message
from typing import Optional

from ..common.exceptions import DeliveryError
from .base import Envelope, Transport

logger = logging.getLogger(__name__)


class SendmailTransport(Transport):
    """Deliver through ``sendmail -i -f <sender> -- <recipients>``."""

    def __init__(
        self,
        path: str = "/usr/sbin/sendmail",
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize the sendmail transport.

        Args:
            path: Path to the sendmail binary.
            timeout: Optional limit in seconds for the sendmail process.
        """
        self.path = path
        self.timeout = timeout

    def command(self, envelope: Envelope) -> list[str]:
        return [self.path, "-i", "-f", envelope.sender, "--", *envelope.recipients]

    def deliver(self, message: Message, envelope: Envelope) -> None:
        recipients = ", ".join(envelope.recipients)
        try:
            result = subprocess.run(
                self.command(envelope),
                input=message.as_bytes(),
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.error("Failed to run %s: %s", self.path, e)
            raise DeliveryError(recipients, f"cannot run {self.path}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            logger.error("%s exited with status %d: %s", self.path, result.returncode, stderr)
            raise DeliveryError(
                recipients,
                f"{self.path} exited with status {result.returncode}",
                {"stderr": stderr},
            )

        logger.info("Message handed to %s", self.path)
