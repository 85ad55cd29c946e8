"""Exception types raised by the Starfish SDK.

Transport and HTTP status failures are not wrapped: they surface as the
``httpx.HTTPError`` subclass raised by the transport. The classes below cover
the failures the SDK itself detects.
"""

from __future__ import annotations


class StarfishError(Exception):
    """Base class for errors raised by the Starfish SDK."""


class ConfigurationError(StarfishError, ValueError):
    """Raised when a service is constructed with an invalid auth combination."""


class TokenError(StarfishError):
    """Raised when the bearer token cannot be used or obtained.

    Covers cached tokens whose expiry claim cannot be decoded and token
    endpoint responses that do not carry an access token.
    """

    PREFIX = "Token Error: "

    @classmethod
    def from_decode_failure(cls, exc: Exception) -> TokenError:
        """Wrap a token decoding failure so it reads distinctly from API errors."""
        return cls(f"{cls.PREFIX}{exc}")


class EmptyResultError(StarfishError):
    """Raised when the API returns a structurally valid but empty result.

    Attributes:
        body: The parsed response body that was judged empty, if any.

    """

    def __init__(self, message: str, *, body: object = None) -> None:
        """Initialize with the error message and the offending body."""
        self.body = body
        super().__init__(message)


__all__ = [
    "ConfigurationError",
    "EmptyResultError",
    "StarfishError",
    "TokenError",
]
