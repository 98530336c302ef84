"""Result container returned by the non-raising router entry points."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome with request metadata."""

    value: T
    meta: dict[str, Any] = field(default_factory=dict)
    ok: Literal[True] = field(default=True, init=False)


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome with request metadata."""

    error: E
    meta: dict[str, Any] = field(default_factory=dict)
    ok: Literal[False] = field(default=False, init=False)


Result = Union[Ok[T], Err[E]]
