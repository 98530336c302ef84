"""Request descriptor and the value types that feed it.

A `RequestDescriptor` is what the router hands to a transport: method, full
URL, headers and optional body bytes. It is immutable; collaborators that need
to add headers (auth, tracing) derive a new descriptor with `with_headers`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple

import requests


class HTTPMethod(str, Enum):
    """HTTP method definitions.

    See https://tools.ietf.org/html/rfc7231#section-4.3
    """

    OPTIONS = "OPTIONS"
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    @classmethod
    def parse(cls, value: HTTPMethod | str) -> HTTPMethod:
        """Return the member for a member or a case-insensitive token."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"unsupported HTTP method: {value!r}") from None


class MimeType(str, Enum):
    """Content types commonly attached to file parts."""

    PDF = "application/pdf"
    JPG = "image/jpeg"
    PNG = "image/png"
    TEXT = "text/plain"


class ImagePart(NamedTuple):
    """Image attachment; the name doubles as the form field and filename."""

    image_name: str
    image_data: bytes


class FilePart(NamedTuple):
    """File attachment sent under the shared ``Files`` form field."""

    file_name: str
    file_mime_type: MimeType | str
    file_data: bytes


def _frozen_headers(headers: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(headers))


@dataclass(frozen=True)
class RequestDescriptor:
    """Fully assembled request ready for a transport.

    Descriptors compare by value but are unhashable, since `headers` is a
    read-only view over a dict.
    """

    method: HTTPMethod
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _frozen_headers(self.headers))

    def with_headers(self, headers: Mapping[str, str]) -> RequestDescriptor:
        """Return a copy with `headers` overlaid on the current ones."""
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)

    def with_body(
        self, body: bytes | None, content_type: str | None = None
    ) -> RequestDescriptor:
        """Return a copy carrying `body`, optionally with a new content type."""
        descriptor = replace(self, body=body)
        if content_type is not None:
            descriptor = descriptor.with_headers({"Content-Type": content_type})
        return descriptor

    def to_requests(self) -> requests.PreparedRequest:
        """Convert into a `requests.PreparedRequest` without sending it."""
        request = requests.Request(
            method=self.method.value,
            url=self.url,
            headers=dict(self.headers),
            data=self.body,
        )
        return request.prepare()
