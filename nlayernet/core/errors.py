"""Error taxonomy shared by every NLayerNet component."""

from __future__ import annotations


class NetworkError(Exception):
    """Base class for fatal network errors."""


class ConfigurationError(NetworkError, ValueError):
    """Malformed topology descriptor or missing/invalid configuration key."""


class NetworkIOError(NetworkError, OSError):
    """A configuration, weight or test-case file could not be read or written."""


class MismatchError(NetworkError, ValueError):
    """A weight file was saved for a different topology."""


class DataShapeError(NetworkError, ValueError):
    """Fewer values were supplied than the topology requires."""


__all__ = [
    "ConfigurationError",
    "DataShapeError",
    "MismatchError",
    "NetworkError",
    "NetworkIOError",
]
