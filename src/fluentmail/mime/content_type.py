"""
Content-Type detection for attachments.

The filename extension is consulted first; only when it is unknown are the
leading bytes of the body inspected.
"""

import re
from typing import Optional

DEFAULT_CONTENT_TYPE = "application/octet-stream"

EXTENSION_TYPES: dict[str, str] = {
    "gif": "image/gif",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "txt": "text/plain",
    "htm": "text/html",
    "html": "text/html",
    "css": "text/css",
    "csv": "text/csv",
    "pdf": "application/pdf",
    "wav": "audio/wav",
}

# Checked in order against the start of the body
MAGIC_PREFIXES: tuple[tuple[bytes, str], ...] = (
    (b"GIF8", "image/gif"),
    (b"\xff\xd8", "image/jpeg"),
    (b"\x89PNG", "image/png"),
    (b"%PDF-", "application/pdf"),
)

_EXTENSION_RE = re.compile(r"\.([a-zA-Z]{3,4})\Z")


def detect(filename: Optional[str], body: bytes | str | None) -> str:
    """
    Guess the MIME type of an attachment.

    Args:
        filename: Declared filename, if any.
        body: Attachment content.

    Returns:
        A ``type/subtype`` string; never fails.
    """
    if filename:
        match = _EXTENSION_RE.search(filename)
        if match:
            content_type = EXTENSION_TYPES.get(match.group(1).lower())
            if content_type is not None:
                return content_type

    if isinstance(body, str):
        body = body.encode("latin-1", errors="replace")

    if body:
        for prefix, content_type in MAGIC_PREFIXES:
            if body.startswith(prefix):
                return content_type

    return DEFAULT_CONTENT_TYPE
