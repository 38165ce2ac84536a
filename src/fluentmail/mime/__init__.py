"""
MIME construction for fluentmail.

This package holds the header set, the part descriptions, the
content-type detector and the tree assembler used by the builder.
"""

from .assembler import assemble, make_boundary
from .content_type import DEFAULT_CONTENT_TYPE, detect
from .headers import HeaderSet, canonical_name
from .parts import (
    Attachment,
    FileBytes,
    FileSource,
    PartAttributes,
    TextPart,
    load_file_source,
)

__all__ = [
    "assemble",
    "make_boundary",
    "detect",
    "DEFAULT_CONTENT_TYPE",
    "HeaderSet",
    "canonical_name",
    "Attachment",
    "FileBytes",
    "FileSource",
    "PartAttributes",
    "TextPart",
    "load_file_source",
]
