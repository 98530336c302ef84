"""URL composition and query string encoding."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping
from urllib.parse import SplitResult, quote, urlsplit

from .errors import MalformedURLError

logger = logging.getLogger(__name__)

# RFC 3986 unreserved, gen-delims and sub-delims, plus "%" for escapes.
_URL_CHARS = re.compile(r"[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]*")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

# Query characters left literal when encoding names and values. "&", "=" and
# "#" are escaped so they cannot split items; "+" stays literal here and is
# escaped by the dedicated pass in `encode_query`.
_QUERY_SAFE = "!$'()*+,/:;?@"


def parse_url(url: str) -> SplitResult:
    """Parse `url`, raising `MalformedURLError` if it is not a valid URL."""
    if not url:
        raise MalformedURLError(url, "empty URL")
    if not _URL_CHARS.fullmatch(url):
        raise MalformedURLError(url, "contains characters not allowed")
    if _BAD_ESCAPE.search(url):
        raise MalformedURLError(url, "invalid percent escape")
    try:
        parts = urlsplit(url)
        _ = parts.port  # raises on an invalid port
    except ValueError as exc:
        raise MalformedURLError(url, str(exc)) from exc
    return parts


def query_items(query_parameters: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Expand a query mapping into ordered (name, value) items.

    Strings produce one item and lists or tuples of strings one item per
    element. Any other value falls back to ``str(value)`` with a warning.
    """
    items: list[tuple[str, str]] = []
    for key, value in query_parameters.items():
        if isinstance(value, str):
            items.append((key, value))
        elif isinstance(value, (list, tuple)) and all(
            isinstance(element, str) for element in value
        ):
            items.extend((key, element) for element in value)
        else:
            logger.warning(
                "query parameter %r value %r is not a string", key, value
            )
            items.append((key, str(value)))
    return items


def encode_query(items: list[tuple[str, str]]) -> str:
    """Percent-encode query items, then escape every literal "+".

    Text that UTF-8 cannot encode (lone surrogates) becomes "?".
    """
    encoded = "&".join(
        f"{_quote(name)}={_quote(value)}" for name, value in items
    )
    return encoded.replace("+", "%2B")


def _quote(text: str) -> str:
    return quote(text, safe=_QUERY_SAFE, errors="replace")


def _replace_query(url: str, query: str) -> str:
    head, hash_mark, fragment = url.partition("#")
    head = head.partition("?")[0]
    return f"{head}?{query}{hash_mark}{fragment}"


def compose_url(
    base_url: str,
    path: str,
    query_parameters: Mapping[str, Any] | None = None,
) -> str:
    """Join `base_url` and `path` verbatim and apply `query_parameters`.

    No separator is inserted between the two strings. A query mapping, even
    an empty one, replaces any query already present in the URL.

    Raises:
        MalformedURLError: the concatenation is not a valid URL, or it has no
            scheme or host.
    """
    url = base_url + path
    parts = parse_url(url)

    if query_parameters is not None:
        url = _replace_query(url, encode_query(query_items(query_parameters)))

    if not parts.scheme:
        raise MalformedURLError(url, "missing scheme")
    if not parts.hostname:
        raise MalformedURLError(url, "missing host")
    return url
