"""Version information for fluentmail."""

__version__ = "0.1.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Release information
__title__ = "fluentmail"
__description__ = "Chainable builder for composing and sending MIME email"
__author__ = "fluentmail developers"
__license__ = "MIT"
__copyright__ = "Copyright 2026 fluentmail developers"


def get_version() -> str:
    """Return the current version string."""
    return __version__
