"""Ok/Err values for operations that can fail in an expected way.

Release steps return a ``Result`` instead of raising, so the orchestrator can
join concurrent uploads and pick which failure to surface:

    match await create_release(http, spec, console=console):
        case Ok(endpoint):
            ...
        case Err(error):
            return Err(error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

__all__ = ["Ok", "Err", "Result"]

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome carrying ``error``."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]

