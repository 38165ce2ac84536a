"""
MIME tree assembly for fluentmail.

This module turns the builder's headers, optional text and HTML bodies
and attachment list into a single MIME tree:

- text and HTML together become a multipart/alternative node
- a body plus attachments become a multipart/mixed node
- a lone part (body, alternative or attachment) is promoted to be the
  whole message, with the top-level headers copied onto it
- no parts at all yield a headers-only message with an empty body
"""

import hashlib
import logging
from email.message import Message
from email.mime.multipart import MIMEMultipart
from typing import Optional, Sequence

from .headers import STRUCTURAL_HEADERS, HeaderSet, apply_headers
from .parts import Attachment, TextPart

logger = logging.getLogger(__name__)


def make_boundary(children: Sequence[Message]) -> str:
    """
    Derive a multipart boundary from the serialized children.

    The same children always produce the same boundary, so repeated
    builds serialize identically.
    """
    digest = hashlib.sha256()
    for child in children:
        digest.update(child.as_bytes())
        digest.update(b"\0")
    return f"=_{digest.hexdigest()[:40]}"


def make_multipart(subtype: str, children: Sequence[Message]) -> MIMEMultipart:
    """Wrap children in a ``multipart/<subtype>`` node."""
    return MIMEMultipart(
        subtype,
        boundary=make_boundary(children),
        _subparts=list(children),
    )


def assemble(
    headers: HeaderSet,
    text: Optional[TextPart],
    html: Optional[TextPart],
    attachments: Sequence[Attachment],
) -> Message:
    """
    Build the MIME tree for a message.

    Args:
        headers: Top-level headers.
        text: Plain text body, if any.
        html: HTML body, if any.
        attachments: Attachments in the order they were added.

    Returns:
        Root node of a newly built tree.
    """
    alternatives = [part.to_mime() for part in (text, html) if part is not None]

    body: Optional[Message]
    if len(alternatives) > 1:
        body = make_multipart("alternative", alternatives)
    elif alternatives:
        body = alternatives[0]
    else:
        body = None

    parts = [body] if body is not None else []
    parts.extend(attachment.to_mime() for attachment in attachments)

    if len(parts) > 1:
        logger.debug("Assembling multipart/mixed with %d parts", len(parts))
        root: Message = make_multipart("mixed", parts)
        apply_headers(headers, root, overwrite=True, skip=STRUCTURAL_HEADERS)
    elif parts:
        logger.debug("Promoting single %s part to top level", parts[0].get_content_type())
        root = parts[0]
        apply_headers(headers, root, overwrite=False)
    else:
        logger.debug("Assembling headers-only message")
        root = Message()
        apply_headers(headers, root, overwrite=True)
        root.set_payload("")

    return root
