"""Request builder for feature-specific API routes.

`BaseRouter` turns a method, base URL, path, query/body data and optional
multipart attachments into a `RequestDescriptor`. It never performs I/O;
sending the descriptor is the job of a transport.
"""

from __future__ import annotations

import json
import logging
from threading import RLock
from typing import Any, Mapping, Sequence

from .config import RouterConfig
from .errors import RouterError, SerializationError
from .multipart import (
    encode_multipart,
    generate_boundary,
    multipart_content_type,
    validate_boundary,
)
from .request import FilePart, HTTPMethod, ImagePart, RequestDescriptor
from .types import Err, Ok, Result
from .urls import compose_url

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def _json_body(kind: str, payload: Any) -> bytes:
    try:
        text = json.dumps(
            payload, ensure_ascii=False, allow_nan=False, separators=(",", ":")
        )
        return text.encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(kind, str(exc)) from exc


def _header_value(key: str, value: Any) -> str | None:
    if value is None:
        logger.warning("dropping header %r: no value", key)
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("latin-1")
    try:
        return str(value)
    except Exception as exc:
        logger.warning(
            "dropping header %r: value not representable (%s)", key, exc
        )
        return None


class BaseRouter:
    """Builds the request for one API route.

    Header updates and resets are serialized per instance, so a router may be
    kept around and shared. The boundary token is generated once per instance
    and used by both the multipart ``Content-Type`` and `multipart_data`.
    """

    def __init__(
        self,
        method: HTTPMethod | str,
        path: str,
        *,
        base_url: str,
        request_headers: Mapping[str, Any] | None = None,
        query_parameters: Mapping[str, Any] | None = None,
        body_parameters: Mapping[str, Any] | None = None,
        body_array_parameters: Sequence[Any] | None = None,
        is_multipart: bool = False,
        images: Sequence[ImagePart] = (),
        files: Sequence[FilePart] | None = None,
        boundary: str | None = None,
    ) -> None:
        """Create a router.

        Args:
            method: HTTP method member or token.
            path: Appended verbatim to `base_url`; include any leading slash.
            base_url: Scheme and host, optionally with a base path.
            request_headers: Overlaid on the default ``Content-Type`` header.
            query_parameters: Values are strings, lists of strings, or other
                values converted with ``str()``.
            body_parameters: JSON object body; also the text fields of a
                multipart body.
            body_array_parameters: JSON array body; wins over
                `body_parameters` when both are given.
            is_multipart: Use a multipart ``Content-Type`` by default.
            images: Image parts for `multipart_data`.
            files: File parts for `multipart_data`.
            boundary: Explicit boundary token; random when omitted.
        """
        self.method = HTTPMethod.parse(method)
        self.path = path
        self.base_url = base_url
        self.query_parameters = query_parameters
        self.body_parameters = body_parameters
        self.body_array_parameters = body_array_parameters
        self.is_multipart = is_multipart
        self.images = list(images)
        self.files = list(files) if files is not None else None
        if boundary is None:
            boundary = generate_boundary()
        self.boundary = validate_boundary(boundary)
        self._lock = RLock()
        self._request_headers: dict[str, Any] = {}
        self.reset_request_headers()
        if request_headers:
            self.update_request_headers(request_headers)

    @classmethod
    def from_config(
        cls,
        config: RouterConfig,
        method: HTTPMethod | str,
        path: str,
        **kwargs: Any,
    ) -> BaseRouter:
        """Create a router for `config.base_url` with the config's headers.

        Caller `request_headers` are applied after the config headers.
        """
        request_headers = config.header_overlay()
        request_headers.update(kwargs.pop("request_headers", None) or {})
        return cls(
            method,
            path,
            base_url=config.base_url,
            request_headers=request_headers,
            **kwargs,
        )

    @property
    def request_headers(self) -> dict[str, Any]:
        """Copy of the headers that finalization will apply."""
        with self._lock:
            return dict(self._request_headers)

    def default_content_type(self) -> str:
        """Return the ``Content-Type`` a header reset restores."""
        if self.is_multipart:
            return multipart_content_type(self.boundary)
        return JSON_CONTENT_TYPE

    def update_request_headers(self, request_headers: Mapping[str, Any]) -> None:
        """Overlay `request_headers`; existing keys are overwritten."""
        with self._lock:
            for key, value in request_headers.items():
                self._request_headers[key] = value

    def reset_request_headers(self) -> None:
        """Drop every overlay and restore the default ``Content-Type``."""
        with self._lock:
            self._request_headers = {
                "Content-Type": self.default_content_type()
            }

    def as_url_request(self) -> RequestDescriptor:
        """Return the finalized request.

        Raises:
            MalformedURLError: base URL plus path is not a valid URL.
            SerializationError: a body cannot be encoded as JSON.
        """
        return self._build(json_body=True)

    def _build(self, *, json_body: bool) -> RequestDescriptor:
        url = compose_url(self.base_url, self.path, self.query_parameters)

        body: bytes | None = None
        if json_body and self.body_parameters is not None:
            body = _json_body("body_parameters", self.body_parameters)
        if json_body and self.body_array_parameters is not None:
            body = _json_body(
                "body_array_parameters", self.body_array_parameters
            )

        headers: dict[str, str] = {}
        for key, value in self.request_headers.items():
            header = _header_value(key, value)
            if header is not None:
                headers[key] = header

        logger.debug("built %s %s", self.method.value, url)
        return RequestDescriptor(
            method=self.method, url=url, headers=headers, body=body
        )

    def try_as_url_request(self) -> Result[RequestDescriptor, RouterError]:
        """Like `as_url_request` but returns an `Ok` or `Err` result."""
        meta: dict[str, Any] = {
            "method": self.method.value,
            "url": self.base_url + self.path,
        }
        try:
            descriptor = self.as_url_request()
        except RouterError as exc:
            meta["final_error"] = type(exc).__name__
            return Err(exc, meta=meta)
        meta["url"] = descriptor.url
        return Ok(descriptor, meta=meta)

    def multipart_data(self) -> bytes:
        """Return the multipart/form-data body for this route."""
        return encode_multipart(
            self.boundary,
            fields=self.body_parameters,
            images=self.images,
            files=self.files,
        )

    def as_multipart_request(self) -> RequestDescriptor:
        """Return the finalized request carrying `multipart_data` as its body.

        Body parameters become text fields here and are not JSON-encoded.

        Raises:
            MalformedURLError: base URL plus path is not a valid URL.
        """
        return self._build(json_body=False).with_body(
            self.multipart_data(),
            content_type=multipart_content_type(self.boundary),
        )
