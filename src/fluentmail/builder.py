"""
Message builder for fluentmail.

This module provides the chainable MessageBuilder used to compose a
message and send it:

    create_message()
        .from_("alerts@example.com")
        .to("ops@example.com", "oncall@example.com")
        .subject("Disk almost full")
        .text_body("Only 2% left on /var")
        .attach_file("df.txt")
        .transport("smtp", host="mail.example.com")
        .send()

Every mutator validates its arguments immediately and returns the
builder. The MIME tree is only assembled by ``build()``, and it is
assembled again on every call.
"""

import logging
from email.headerregistry import Address
from email.message import Message
from typing import Any, Mapping, Optional, Sequence, Union

from .common.config import Settings, get_settings
from .common.exceptions import (
    TransportNotFoundError,
    UnknownConfigKeyError,
    ValidationError,
)
from .mime.assembler import assemble
from .mime.headers import HeaderSet
from .mime.parts import (
    HTML_DEFAULTS,
    TEXT_DEFAULTS,
    Attachment,
    FileSource,
    TextPart,
    load_file_source,
)
from .transports.base import Transport, is_transport
from .transports.registry import TransportRegistry, default_registry

logger = logging.getLogger(__name__)

AddressValue = Union[str, Address]

# Construction mapping key -> builder method
CONFIG_SETTERS = {
    "to": "to",
    "from": "from_",
    "cc": "cc",
    "bcc": "bcc",
    "reply_to": "reply_to",
    "subject": "subject",
    "text_body": "text_body",
    "html_body": "html_body",
    "transport": "transport",
}

# Keys whose list values are spread over the setter's arguments
LIST_CONFIG_KEYS = frozenset({"to", "cc", "bcc", "reply_to", "transport"})


class MessageBuilder:
    """
    Accumulates headers, bodies and attachments for one message.

    A builder is not thread-safe; build one message per thread and share
    the finished trees instead.
    """

    def __init__(
        self,
        registry: Optional[TransportRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize an empty builder.

        Args:
            registry: Registry used to resolve transport monikers.
                Defaults to the built-in transports.
            settings: Settings for the default transport. Defaults to
                the cached process settings.
        """
        self.registry = registry if registry is not None else default_registry()
        self._settings = settings
        self._headers = HeaderSet()
        self._text: Optional[TextPart] = None
        self._html: Optional[TextPart] = None
        self._attachments: list[Attachment] = []
        self._transport: Optional[Transport] = None

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        registry: Optional[TransportRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> "MessageBuilder":
        """
        Create a builder from a mapping of initial values.

        Args:
            config: Mapping with any of the keys in ``CONFIG_SETTERS``.
                For to, cc, bcc, reply_to and transport a list or tuple
                is passed to the setter as separate arguments.
            registry: Optional transport registry.
            settings: Optional settings.

        Returns:
            Configured MessageBuilder.

        Raises:
            UnknownConfigKeyError: If the mapping has unrecognized keys.
        """
        unknown = [key for key in config if key not in CONFIG_SETTERS]
        if unknown:
            raise UnknownConfigKeyError(unknown)

        builder = cls(registry=registry, settings=settings)
        for key, value in config.items():
            if key in LIST_CONFIG_KEYS and isinstance(value, (list, tuple)):
                args = list(value)
            else:
                args = [value]
            getattr(builder, CONFIG_SETTERS[key])(*args)
        return builder

    # Headers

    def header(self, name: str, value: Any) -> "MessageBuilder":
        """
        Set a header, replacing any earlier value for the same name.

        Raises:
            ValidationError: If the name or value is empty.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("header", name, "header name is required")
        if ":" in name or any(ch.isspace() for ch in name.strip()):
            raise ValidationError("header", name, "invalid header name")
        if value is None or (isinstance(value, str) and not value):
            raise ValidationError(name, value, "header value is required")
        self._set_header(name, str(value))
        return self

    def _set_header(self, name: str, value: str) -> None:
        if "\r" in value or "\n" in value:
            raise ValidationError(name, value, "header values may not contain line breaks")
        self._headers.set(name, value)

    def _address_list(
        self,
        field: str,
        addresses: Sequence[Any],
        allow_empty: bool,
        single: bool = False,
    ) -> list[str]:
        if not addresses and not allow_empty:
            raise ValidationError(field, [], f"{field} is a required field")
        if single and len(addresses) > 1:
            raise ValidationError(
                field, list(addresses), f"only one address is allowed in the {field} header"
            )

        result: list[str] = []
        for address in addresses:
            if address is None:
                raise ValidationError(
                    field, list(addresses), f"list of {field} headers contains undefined values"
                )
            if isinstance(address, Address):
                address = str(address)
            elif not isinstance(address, str):
                raise ValidationError(
                    field,
                    list(addresses),
                    f"list of {field} headers contains a {type(address).__name__}",
                )
            address = address.strip()
            if not address:
                raise ValidationError(
                    field, list(addresses), f"list of {field} headers contains empty values"
                )
            result.append(address)
        return result

    def _set_addresses(self, name: str, addresses: list[str]) -> None:
        if addresses:
            self._set_header(name, ", ".join(addresses))
        else:
            self._headers.remove(name)

    def to(self, *addresses: AddressValue) -> "MessageBuilder":
        """Set the To header. At least one address is required."""
        self._set_addresses("To", self._address_list("to", addresses, allow_empty=False))
        return self

    def from_(self, *addresses: AddressValue) -> "MessageBuilder":
        """Set the From header to exactly one address."""
        self._set_addresses(
            "From", self._address_list("from", addresses, allow_empty=False, single=True)
        )
        return self

    def reply_to(self, *addresses: AddressValue) -> "MessageBuilder":
        """Set the Reply-To header to exactly one address."""
        self._set_addresses(
            "Reply-To",
            self._address_list("reply-to", addresses, allow_empty=False, single=True),
        )
        return self

    def cc(self, *addresses: AddressValue) -> "MessageBuilder":
        """Set the Cc header. No addresses clears it."""
        self._set_addresses("Cc", self._address_list("cc", addresses, allow_empty=True))
        return self

    def bcc(self, *addresses: AddressValue) -> "MessageBuilder":
        """Set the Bcc header. No addresses clears it."""
        self._set_addresses("Bcc", self._address_list("bcc", addresses, allow_empty=True))
        return self

    def subject(self, text: Optional[str]) -> "MessageBuilder":
        """Set the Subject header."""
        if text is None:
            raise ValidationError("subject", text, "subject is a required field")
        self._set_header("Subject", str(text))
        return self

    def header_names(self) -> list[str]:
        """Return the names of the top-level headers set so far."""
        return self._headers.names()

    # Bodies and attachments

    def text_body(
        self, body: Union[str, bytes, None], **attrs: Any
    ) -> "MessageBuilder":
        """
        Set the plain text body.

        Defaults to text/plain, utf-8, quoted-printable; ``attrs``
        (content_type, charset, encoding, format, ...) override them.
        A None body leaves the builder unchanged.
        """
        if body is None:
            return self
        self._text = TextPart.create("text_body", body, attrs, TEXT_DEFAULTS)
        return self

    def html_body(
        self, body: Union[str, bytes, None], **attrs: Any
    ) -> "MessageBuilder":
        """Set the HTML body. Same contract as ``text_body``."""
        if body is None:
            return self
        self._html = TextPart.create("html_body", body, attrs, HTML_DEFAULTS)
        return self

    def attach(
        self, body: Union[bytes, str, None], **attrs: Any
    ) -> Optional["MessageBuilder"]:
        """
        Add an attachment.

        Args:
            body: Attachment content.
            **attrs: MIME attributes (content_type, filename, name,
                encoding, disposition, charset). The content type is
                detected from the filename or content when not given.

        Returns:
            The builder, or None if ``body`` is None (nothing is added).
        """
        if body is None:
            return None
        attachment = Attachment.create(body, attrs)
        self._attachments.append(attachment)
        logger.debug(
            "Attached %d bytes as %s (%s)",
            len(attachment.content),
            attachment.content_type,
            attachment.filename,
        )
        return self

    def attach_file(self, source: FileSource, **attrs: Any) -> "MessageBuilder":
        """
        Attach a file read fully into memory.

        Args:
            source: A path, or FileBytes for content already in memory.
            **attrs: MIME attributes; ``name`` and ``filename`` default to
                the file's base name.

        Raises:
            IoError: If the file does not exist or cannot be read.
        """
        content, name = load_file_source(source)
        attrs = {"name": name, "filename": name, **attrs}
        self.attach(content, **attrs)
        return self

    def parts(self) -> list[Message]:
        """Return newly built leaves for the text, HTML and attachment parts."""
        slots = [self._text, self._html, *self._attachments]
        return [slot.to_mime() for slot in slots if slot is not None]

    # Transport

    def transport(
        self,
        transport: Union[Transport, str],
        options: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> "MessageBuilder":
        """
        Choose how the message is sent.

        Args:
            transport: A transport instance, or a moniker resolved through
                the builder's registry.
            options: Constructor options for a moniker.
            **kwargs: More constructor options, merged over ``options``.

        Raises:
            TransportNotFoundError: If the moniker cannot be resolved.
        """
        if isinstance(transport, str):
            self._transport = self.registry.resolve(transport, {**(options or {}), **kwargs})
        elif is_transport(transport):
            self._transport = transport
        else:
            raise TransportNotFoundError(
                repr(transport), "expected a transport or a transport name"
            )
        return self

    @property
    def configured_transport(self) -> Optional[Transport]:
        """The transport set with ``transport()``, or None."""
        return self._transport

    def _resolve_transport(self, override: Any = None) -> Transport:
        if override is not None:
            if isinstance(override, str):
                return self.registry.resolve(override)
            if is_transport(override):
                return override
            raise TransportNotFoundError(repr(override), "expected a transport or a transport name")

        if self._transport is not None:
            return self._transport

        settings = (self._settings or get_settings()).transport
        logger.debug("No transport configured, using default %s", settings.name)
        return self.registry.resolve(settings.name, settings.transport_options())

    # Output

    def build(self) -> Message:
        """
        Assemble the MIME tree from the current state.

        The builder keeps no reference to the returned tree.
        """
        logger.debug(
            "Building message: text=%s, html=%s, attachments=%d",
            self._text is not None,
            self._html is not None,
            len(self._attachments),
        )
        return assemble(self._headers.copy(), self._text, self._html, list(self._attachments))

    def as_string(self) -> str:
        """Return the message in wire format."""
        return self.build().as_string()

    render = as_string

    def send(self, options: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Send the message, reporting failure as False.

        Args:
            options: Optional per-call options: ``to`` and ``from`` override
                the envelope, ``transport`` overrides the configured
                transport for this call.

        Returns:
            True if the transport accepted the message.
        """
        options = dict(options or {})
        transport = self._resolve_transport(options.pop("transport", None))
        return transport.try_send(self.build(), options)

    def send_or_die(self, options: Optional[Mapping[str, Any]] = None) -> None:
        """
        Send the message, raising on failure.

        Raises:
            DeliveryError: If the transport fails to deliver.
        """
        options = dict(options or {})
        transport = self._resolve_transport(options.pop("transport", None))
        transport.send(self.build(), options)

    def __repr__(self) -> str:
        return (
            f"MessageBuilder(headers={self._headers.names()!r}, "
            f"text={self._text is not None}, html={self._html is not None}, "
            f"attachments={len(self._attachments)})"
        )


def create_message(
    config: Optional[Mapping[str, Any]] = None,
    registry: Optional[TransportRegistry] = None,
    settings: Optional[Settings] = None,
) -> MessageBuilder:
    """
    Factory function to create a MessageBuilder.

    Args:
        config: Optional mapping of initial values, see
            ``MessageBuilder.from_config``.
        registry: Optional transport registry.
        settings: Optional settings for the default transport.

    Returns:
        New MessageBuilder instance.
    """
    return MessageBuilder.from_config(config or {}, registry=registry, settings=settings)
