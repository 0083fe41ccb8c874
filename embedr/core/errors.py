"""
Error types raised by embedr.

Every error derives from EmbedError so callers can catch a single type.
A provider declining to embed (HTTP 401) is not an error and has no class here.
"""

from typing import Optional, Sequence


class EmbedError(Exception):
    """Base class for all embedr errors."""
    pass


class UsageError(EmbedError, ValueError):
    """The caller passed something embedr cannot work with (missing url, unknown format)."""
    pass


class UnsupportedError(EmbedError):
    """
    The target cannot be served: the protocol is not http(s), the domain has
    no registered provider, or the provider rejected the requested format.
    """
    pass


class NotFoundError(EmbedError):
    """The provider reported that the target resource does not exist."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class CodecUnavailableError(EmbedError):
    """No codec could be used because its backing module is not installed."""

    def __init__(self, message: str, attempted: Sequence[str] = ()):
        super().__init__(message)
        self.attempted = list(attempted)


class MalformedResponseError(EmbedError):
    """The provider answered 200 but the body could not be decoded."""
    pass


class NetworkError(EmbedError):
    """The transport failed to complete the request."""
    pass


class HTTPStatusError(NetworkError):
    """The provider answered with a status embedr has no mapping for."""

    def __init__(self, message: str, status_code: int, request_url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.request_url = request_url
