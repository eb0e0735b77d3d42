"""Provider error taxonomy."""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for all metadata provider failures."""


class TransportError(ProviderError):
    """Network / DNS / timeout / unexpected upstream status."""


class NotFoundError(ProviderError):
    """The provider has no result for the query."""


class MalformedResponseError(ProviderError):
    """Payload did not have the expected shape."""
