"""
SMTP transport for fluentmail.

Submits messages to an SMTP server with aiosmtplib. The builder API is
synchronous, so each delivery runs its own event loop, on a worker
thread when the caller is already inside one.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from email.message import Message
from typing import Any, Optional

import aiosmtplib

from ..common.exceptions import DeliveryError
from .base import Envelope, Transport

logger = logging.getLogger(__name__)


class SMTPTransport(Transport):
    """
    Deliver messages to an SMTP server.

    This class handles:
    - Implicit TLS or STARTTLS
    - Optional authentication
    - Per-recipient refusal reporting
    """

    DEFAULT_TIMEOUT = 60  # seconds

    def __init__(
        self,
        host: str = "localhost",
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = False,
        start_tls: Optional[bool] = None,
        timeout: float = DEFAULT_TIMEOUT,
        validate_certs: bool = True,
        local_hostname: Optional[str] = None,
    ) -> None:
        """
        Initialize the SMTP transport.

        Args:
            host: SMTP server hostname.
            port: SMTP server port (465 with implicit TLS, 25 otherwise).
            username: Optional login user.
            password: Optional login password.
            use_tls: Connect with implicit TLS.
            start_tls: True forces STARTTLS, False disables it, None
                upgrades when the server offers it.
            timeout: Timeout in seconds for each SMTP operation.
            validate_certs: Whether to verify the server certificate.
            local_hostname: Name to send in EHLO.
        """
        self.host = host
        self.port = port if port is not None else (465 if use_tls else 25)
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.start_tls = start_tls
        self.timeout = timeout
        self.validate_certs = validate_certs
        self.local_hostname = local_hostname

        logger.debug(
            "SMTPTransport initialized with host=%s, port=%d, tls=%s",
            host,
            self.port,
            use_tls,
        )

    def deliver(self, message: Message, envelope: Envelope) -> None:
        recipients = ", ".join(envelope.recipients)
        try:
            errors = self._run(message.as_bytes(), envelope)
        except aiosmtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed for %s: %s", self.host, e)
            raise DeliveryError(
                recipients, f"authentication failed for {self.host}", {"error": str(e)}
            ) from e
        except aiosmtplib.SMTPConnectError as e:
            logger.error("Failed to connect to %s:%d: %s", self.host, self.port, e)
            raise DeliveryError(
                recipients, f"cannot connect to {self.host}:{self.port}", {"error": str(e)}
            ) from e
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("SMTP error with %s: %s", self.host, e)
            raise DeliveryError(
                recipients, f"SMTP error with {self.host}", {"error": str(e)}
            ) from e

        if errors:
            refused = {addr: str(response) for addr, response in errors.items()}
            logger.error("Recipients refused by %s: %s", self.host, refused)
            raise DeliveryError(
                ", ".join(refused), "recipients refused", {"refused": refused}
            )

        logger.info("Message accepted by %s:%d", self.host, self.port)

    async def _submit(self, data: bytes, envelope: Envelope) -> dict[str, Any]:
        smtp = aiosmtplib.SMTP(
            hostname=self.host,
            port=self.port,
            timeout=self.timeout,
            use_tls=self.use_tls,
            start_tls=self.start_tls,
            validate_certs=self.validate_certs,
            local_hostname=self.local_hostname,
        )
        async with smtp:
            if self.username and self.password:
                await smtp.login(self.username, self.password)
            errors, _ = await smtp.sendmail(envelope.sender, envelope.recipients, data)
        return errors

    def _run(self, data: bytes, envelope: Envelope) -> dict[str, Any]:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self._submit(data, envelope))

        # asyncio.run refuses to nest inside a running loop
        logger.debug("Event loop already running, submitting from a worker thread")
        with ThreadPoolExecutor(max_workers=1) as executor:
            return executor.submit(asyncio.run, self._submit(data, envelope)).result()
