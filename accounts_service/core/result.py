"""Two-variant outcome for operations that can fail in expected ways.

Domain operations return ``Ok(value)`` or ``Err(error)`` instead of raising,
so the caller has to look at the outcome before using it::

    match await register_user(repo, hasher, name=..., email=..., password=...):
        case Ok(user):
            ...
        case Err(error):
            ...

Exceptions stay reserved for infrastructure faults.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True


Result = Ok[T] | Err[E]
