"""
Pytest fixtures for fluentmail tests.

This module provides common fixtures used across test modules.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from fluentmail import MemoryTransport, MessageBuilder, create_message  # noqa: E402


@pytest.fixture
def memory_transport() -> MemoryTransport:
    """Provide a transport that records deliveries."""
    return MemoryTransport()


@pytest.fixture
def builder(memory_transport: MemoryTransport) -> MessageBuilder:
    """Provide a builder with sender, recipient and subject already set."""
    return (
        create_message()
        .from_("sender@example.com")
        .to("rcpt@example.com")
        .subject("Hello")
        .transport(memory_transport)
    )


@pytest.fixture
def pdf_file(tmp_path):
    """Write a small PDF-looking file and return its path."""
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4\n% fake document\n")
    return path
