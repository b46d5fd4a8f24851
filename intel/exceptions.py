"""
Error types raised by the intelligence layer.
"""


class IntelError(Exception):
    """Base class for competitive intelligence errors."""


class NetworkFetchError(IntelError):
    """RPC node or indexer unreachable, or returned a malformed response."""


class ConfigurationError(IntelError, ValueError):
    """contracts.json or environment does not describe the game correctly."""
