"""
Header handling for composed messages.

A HeaderSet keeps one value per header name. Names are matched
case-insensitively and stored in canonical casing, so setting ``to``
after ``To`` replaces the earlier value instead of adding a second line.
"""

from email.header import Header
from email.message import Message
from email.utils import formataddr, getaddresses
from typing import Iterable, Iterator, Optional, Union

# Names whose canonical form is not plain word capitalization
_SPECIAL_NAMES = {
    "message-id": "Message-ID",
    "mime-version": "MIME-Version",
    "content-id": "Content-ID",
}

ADDRESS_HEADERS = frozenset({"from", "to", "cc", "bcc", "reply-to", "sender"})

# Owned by the assembler on composite nodes
STRUCTURAL_HEADERS = frozenset({"content-type", "content-transfer-encoding"})


def canonical_name(name: str) -> str:
    """
    Normalize a header name to its canonical casing.

    Args:
        name: Header name in any casing, e.g. ``"content-type"``.

    Returns:
        Canonical name, e.g. ``"Content-Type"``.
    """
    key = name.strip().lower()
    if key in _SPECIAL_NAMES:
        return _SPECIAL_NAMES[key]
    return "-".join(word.capitalize() for word in key.split("-"))


def encode_value(name: str, value: str) -> Union[str, Header]:
    """
    Prepare a header value for a compat32 message.

    ASCII values are returned untouched. Non-ASCII address headers get
    RFC 2047 encoded display names; any other non-ASCII value becomes an
    encoded-word Header.
    """
    if value.isascii():
        return value
    if name.lower() in ADDRESS_HEADERS:
        return ", ".join(
            formataddr(pair, charset="utf-8") for pair in getaddresses([value])
        )
    return Header(value, "utf-8", header_name=name)


class HeaderSet:
    """Ordered, case-insensitive mapping of header name to a single value."""

    def __init__(self, items: Optional[Iterable[tuple[str, str]]] = None) -> None:
        self._headers: dict[str, tuple[str, str]] = {}
        for name, value in items or ():
            self.set(name, value)

    def set(self, name: str, value: str) -> None:
        """Set ``name`` to ``value``, replacing any previous value."""
        self._headers[name.strip().lower()] = (canonical_name(name), value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        entry = self._headers.get(name.strip().lower())
        return entry[1] if entry else default

    def remove(self, name: str) -> None:
        self._headers.pop(name.strip().lower(), None)

    def names(self) -> list[str]:
        """Return canonical header names in insertion order."""
        return [canonical for canonical, _ in self._headers.values()]

    def items(self) -> list[tuple[str, str]]:
        return list(self._headers.values())

    def copy(self) -> "HeaderSet":
        return HeaderSet(self.items())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return f"HeaderSet({self.items()!r})"


def apply_headers(
    headers: HeaderSet,
    message: Message,
    overwrite: bool,
    skip: Iterable[str] = (),
) -> None:
    """
    Copy headers onto a MIME node.

    Args:
        headers: Source header set.
        message: Target node.
        overwrite: Replace headers the node already carries. When False,
            those headers are left untouched.
        skip: Lowercase header names never copied.
    """
    skipped = set(skip)
    for name, value in headers.items():
        if name.lower() in skipped:
            continue
        if name in message:
            if not overwrite:
                continue
            del message[name]
        message[name] = encode_value(name, value)
