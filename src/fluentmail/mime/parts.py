"""
Part descriptions and MIME leaf construction.

The builder stores what each part should contain, not MIME objects.
Every call to ``to_mime()`` produces a brand-new leaf, which is what
lets the assembler rebuild the whole tree from scratch on each build.
"""

import codecs
import logging
import os
import re
from dataclasses import dataclass
from email import encoders
from email.charset import BASE64, QP, Charset
from email.mime.nonmultipart import MIMENonMultipart
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..common.exceptions import IoError, ValidationError
from .content_type import detect

logger = logging.getLogger(__name__)

_CONTENT_TYPE_RE = re.compile(r"^[\w.+-]+/[\w.+-]+$")

_ATTACHMENT_ENCODERS: dict[str, Callable[[Any], None]] = {
    "base64": encoders.encode_base64,
    "quoted-printable": encoders.encode_quopri,
    "7bit": encoders.encode_7or8bit,
    "8bit": encoders.encode_7or8bit,
}

_TEXT_BODY_ENCODINGS: dict[str, Optional[int]] = {
    "base64": BASE64,
    "quoted-printable": QP,
    "7bit": None,
    "8bit": None,
}

TEXT_DEFAULTS = {
    "content_type": "text/plain",
    "charset": "utf-8",
    "encoding": "quoted-printable",
}

HTML_DEFAULTS = {
    "content_type": "text/html",
    "charset": "utf-8",
    "encoding": "quoted-printable",
}

ATTACHMENT_DEFAULTS = {
    "encoding": "base64",
}


class PartAttributes(BaseModel):
    """MIME attributes accepted by body and attachment setters."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    content_type: Optional[str] = None
    charset: Optional[str] = None
    encoding: Optional[str] = None
    name: Optional[str] = None
    filename: Optional[str] = None
    disposition: Optional[str] = None
    format: Optional[str] = None

    @field_validator("content_type")
    @classmethod
    def validate_content_type(cls, v: Optional[str]) -> Optional[str]:
        """Require a ``type/subtype`` value."""
        if v is None:
            return v
        v = v.strip().lower()
        if not _CONTENT_TYPE_RE.match(v):
            raise ValueError("content_type must look like 'type/subtype'")
        if v.startswith("multipart/"):
            raise ValueError("multipart types are built from parts, not declared")
        return v

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: Optional[str]) -> Optional[str]:
        """Restrict to the transfer encodings the encoder supports."""
        if v is None:
            return v
        v = v.strip().lower()
        if v not in _ATTACHMENT_ENCODERS:
            raise ValueError(
                f"encoding must be one of: {', '.join(_ATTACHMENT_ENCODERS)}"
            )
        return v


def parse_attributes(
    field: str,
    attrs: Mapping[str, Any],
    defaults: Mapping[str, Any],
) -> PartAttributes:
    """
    Merge caller attributes over defaults and validate them.

    Args:
        field: Name of the builder call, used in error messages.
        attrs: Attributes supplied by the caller.
        defaults: Defaults the caller's attributes override.

    Returns:
        Validated PartAttributes.

    Raises:
        ValidationError: If an attribute is unknown or invalid.
    """
    merged = {**defaults, **attrs}
    try:
        return PartAttributes(**merged)
    except PydanticValidationError as e:
        error = e.errors()[0]
        location = ".".join(str(item) for item in error["loc"])
        raise ValidationError(
            field=f"{field}.{location}" if location else field,
            value=dict(attrs),
            reason=error["msg"],
        ) from e


@dataclass(frozen=True)
class TextPart:
    """A text or HTML body."""

    body: str
    attributes: PartAttributes

    @classmethod
    def create(
        cls,
        field: str,
        body: Union[str, bytes],
        attrs: Mapping[str, Any],
        defaults: Mapping[str, Any],
    ) -> "TextPart":
        attributes = parse_attributes(field, attrs, defaults)
        charset = attributes.charset or "utf-8"
        try:
            codecs.lookup(charset)
        except LookupError as e:
            raise ValidationError(
                field=f"{field}.charset", value=charset, reason="unknown charset"
            ) from e

        if isinstance(body, bytes):
            try:
                body = body.decode(charset)
            except (UnicodeDecodeError, LookupError) as e:
                raise ValidationError(
                    field=field,
                    value=body[:32],
                    reason=f"body cannot be decoded as {charset}: {e}",
                ) from e
        elif not isinstance(body, str):
            raise ValidationError(
                field=field,
                value=body,
                reason=f"expected text, got {type(body).__name__}",
            )

        # set_payload encodes with the output charset, which may differ
        output_charset = Charset(charset).output_charset or charset
        try:
            body.encode(output_charset)
        except (UnicodeEncodeError, LookupError) as e:
            raise ValidationError(
                field=field,
                value=body[:32],
                reason=f"body cannot be encoded as {output_charset}: {e}",
            ) from e
        return cls(body=body, attributes=attributes)

    def to_mime(self) -> MIMENonMultipart:
        """Create a fresh MIME leaf for this body."""
        attrs = self.attributes
        maintype, subtype = (attrs.content_type or "text/plain").split("/", 1)

        charset = Charset(attrs.charset or "utf-8")
        charset.body_encoding = _TEXT_BODY_ENCODINGS[attrs.encoding or "quoted-printable"]

        part = MIMENonMultipart(maintype, subtype)
        part.set_payload(self.body, charset)
        if attrs.format:
            part.set_param("format", attrs.format)
        if attrs.name:
            part.set_param("name", attrs.name)
        _set_disposition(part, attrs)
        return part


@dataclass(frozen=True)
class Attachment:
    """Represents an email attachment."""

    content: bytes
    attributes: PartAttributes

    @property
    def filename(self) -> Optional[str]:
        return self.attributes.filename

    @property
    def content_type(self) -> str:
        return self.attributes.content_type or "application/octet-stream"

    @classmethod
    def create(
        cls, content: Union[bytes, str], attrs: Mapping[str, Any]
    ) -> "Attachment":
        """
        Create an Attachment, detecting its content type when not given.

        Args:
            content: Attachment content. Text is stored as UTF-8.
            attrs: MIME attributes for the part.

        Returns:
            Attachment instance.
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        elif not isinstance(content, (bytes, bytearray, memoryview)):
            raise ValidationError(
                field="attach",
                value=content,
                reason=f"expected bytes, got {type(content).__name__}",
            )
        content = bytes(content)

        attributes = parse_attributes("attach", attrs, ATTACHMENT_DEFAULTS)
        if not attributes.content_type:
            detected = detect(attributes.filename, content)
            logger.debug(
                "Detected content type %s for %s", detected, attributes.filename
            )
            attributes = attributes.model_copy(update={"content_type": detected})

        return cls(content=content, attributes=attributes)

    def to_mime(self) -> MIMENonMultipart:
        """Create a fresh MIME leaf for this attachment."""
        attrs = self.attributes
        maintype, subtype = self.content_type.split("/", 1)

        part = MIMENonMultipart(maintype, subtype)
        if attrs.charset:
            part.set_param("charset", attrs.charset)
        if attrs.format:
            part.set_param("format", attrs.format)
        if attrs.name:
            part.set_param("name", attrs.name)

        part.set_payload(self.content)
        _ATTACHMENT_ENCODERS[attrs.encoding or "base64"](part)
        _set_disposition(part, attrs)
        return part


@dataclass(frozen=True)
class FileBytes:
    """In-memory file content to attach under the given name."""

    data: bytes
    name: str


FileSource = Union[str, os.PathLike, FileBytes]


def load_file_source(source: FileSource) -> tuple[bytes, str]:
    """
    Read an attachment source fully into memory.

    Args:
        source: A filesystem path or a FileBytes value.

    Returns:
        Tuple of (content, base filename).

    Raises:
        IoError: If the path does not exist or cannot be read.
        ValidationError: If the source is neither a path nor FileBytes.
    """
    if isinstance(source, FileBytes):
        return bytes(source.data), os.path.basename(source.name)

    if not isinstance(source, (str, os.PathLike)):
        raise ValidationError(
            field="attach_file",
            value=source,
            reason=f"expected a file path or FileBytes, got {type(source).__name__}",
        )

    path = Path(source)
    if not path.is_file():
        raise IoError(str(path), "no such file")

    try:
        content = path.read_bytes()
    except OSError as e:
        raise IoError(str(path), str(e), {"error": str(e)}) from e

    return content, path.name


def _set_disposition(part: MIMENonMultipart, attrs: PartAttributes) -> None:
    if attrs.filename:
        part.add_header(
            "Content-Disposition",
            attrs.disposition or "attachment",
            filename=attrs.filename,
        )
    elif attrs.disposition:
        part.add_header("Content-Disposition", attrs.disposition)
