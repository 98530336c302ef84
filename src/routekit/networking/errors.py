"""Error types raised while building requests."""

from __future__ import annotations


class RouterError(Exception):
    """Base class for request construction errors."""


class MalformedURLError(RouterError, ValueError):
    """Base URL and path do not form a usable URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"malformed URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class SerializationError(RouterError, TypeError):
    """A request body could not be encoded as JSON."""

    def __init__(self, kind: str, reason: str) -> None:
        super().__init__(f"cannot serialize {kind} to JSON: {reason}")
        self.kind = kind
        self.reason = reason
