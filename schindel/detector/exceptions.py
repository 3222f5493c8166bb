"""Exceptions raised by the schindel detector package."""
from __future__ import annotations


class SchindelError(Exception):
    """Base class for all schindel errors."""


class InvalidConfigError(SchindelError, ValueError):
    """A :class:`ShingleConfig` field is out of range."""


class ConfigMismatchError(SchindelError, ValueError):
    """Two fingerprints (or a fingerprint and an index) use different configurations."""


class UnknownHasherError(SchindelError, KeyError):
    """No hash family is registered under the requested name."""

    def __str__(self) -> str:  # KeyError quotes its argument otherwise
        return str(self.args[0]) if self.args else ""


class TokenEncodingError(SchindelError, TypeError):
    """A token cannot be encoded by the configured token codec."""
