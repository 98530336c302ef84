"""multipart/form-data body encoding (RFC 2046 framing)."""

from __future__ import annotations

import re
import uuid
from typing import Any, Iterable, Mapping

from .request import FilePart, ImagePart

FILES_FIELD_NAME = "Files"
IMAGE_CONTENT_TYPE = "image/jpeg"

_BCHARS = r"0-9A-Za-z'()+_,\-./:=?"
_BOUNDARY = re.compile(rf"[{_BCHARS} ]{{0,69}}[{_BCHARS}]")


def generate_boundary() -> str:
    """Return a fresh random boundary token."""
    return str(uuid.uuid4()).upper()


def validate_boundary(boundary: str) -> str:
    """Return `boundary` unchanged or raise ValueError if RFC 2046 rejects it."""
    if not _BOUNDARY.fullmatch(boundary):
        raise ValueError(f"invalid multipart boundary: {boundary!r}")
    return boundary


def multipart_content_type(boundary: str) -> str:
    """Return the ``Content-Type`` value announcing `boundary`."""
    return f"multipart/form-data; boundary={boundary}"


def _text(value: str) -> bytes:
    return value.encode("utf-8", errors="replace")


def encode_multipart(
    boundary: str,
    fields: Mapping[str, Any] | None = None,
    images: Iterable[ImagePart] = (),
    files: Iterable[FilePart] | None = None,
) -> bytes:
    """Build a multipart/form-data body.

    Parts are written in a fixed order: text fields (``str(value)``, not JSON),
    then images, then files. Every part is preceded by ``\\r\\n--<boundary>\\r\\n``
    and the body ends with ``\\r\\n--<boundary>--\\r\\n``.
    """
    delimiter = _text(f"\r\n--{boundary}\r\n")
    chunks: list[bytes] = []

    if fields is not None:
        for key, value in fields.items():
            chunks.append(delimiter)
            chunks.append(
                _text(f'Content-Disposition: form-data; name="{key}"\r\n\r\n')
            )
            chunks.append(_text(str(value)))

    for image_name, image_data in images:
        chunks.append(delimiter)
        chunks.append(
            _text(
                f'Content-Disposition: form-data; name="{image_name}"; '
                f'filename="{image_name}"\r\n'
            )
        )
        chunks.append(_text(f"Content-Type: {IMAGE_CONTENT_TYPE}\r\n\r\n"))
        chunks.append(bytes(image_data))

    if files is not None:
        for file_name, file_mime_type, file_data in files:
            mime_type = getattr(file_mime_type, "value", file_mime_type)
            chunks.append(delimiter)
            chunks.append(
                _text(
                    f'Content-Disposition: form-data; name="{FILES_FIELD_NAME}"; '
                    f'filename="{file_name}"\r\n'
                )
            )
            chunks.append(_text(f"Content-Type: {mime_type}\r\n\r\n"))
            chunks.append(bytes(file_data))

    chunks.append(_text(f"\r\n--{boundary}--\r\n"))
    return b"".join(chunks)
