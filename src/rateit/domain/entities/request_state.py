"""Tagged request state shared by the search and detail streams.

A stream is always in exactly one of ``Idle``, ``Loading``, ``Success``
or ``Failure``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class FailureKind(str, Enum):
    """Why a request ended in ``Failure``."""

    NOT_FOUND = "not_found"  # Catalog answered, nothing matched
    TRANSPORT = "transport"  # Network / HTTP / payload error


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    key: str = ""  # Query or catalog ID being loaded


@dataclass(frozen=True)
class Success(Generic[T]):
    payload: T


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str


RequestState = Union[Idle, Loading, Success[T], Failure]

IDLE = Idle()
