"""Configuration model shared by the routers of one API."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .errors import MalformedURLError
from .urls import parse_url


@dataclass(frozen=True)
class RouterConfig:
    """Settings applied by `BaseRouter.from_config`.

    Headers from here are ordinary overlays on top of the router's
    ``Content-Type`` default, so resetting a router's headers drops them.
    Unlike a router's own base URL, `base_url` is checked up front: every
    route of the API is built from it.
    """

    base_url: str
    user_agent: str | None = None
    default_headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        parts = parse_url(self.base_url)
        if not parts.scheme or not parts.hostname:
            raise MalformedURLError(
                self.base_url, "base_url needs a scheme and a host"
            )
        if self.user_agent is not None and not self.user_agent:
            raise ValueError("user_agent must be non-empty when provided")
        for name, value in self.default_headers.items():
            if not name or not isinstance(value, str):
                raise ValueError(
                    f"default header {name!r} needs a name and a string value"
                )

        object.__setattr__(
            self,
            "default_headers",
            MappingProxyType(dict(self.default_headers)),
        )

    def header_overlay(self) -> dict[str, str]:
        """Return the headers this config contributes to a router.

        An explicit ``User-Agent`` default header replaces `user_agent`.
        """
        headers: dict[str, str] = {}
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        headers.update(self.default_headers)
        return headers
