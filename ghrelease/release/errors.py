"""Error payload for release runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "configuration",
    "transport",
    "api",
    "packaging",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """A fatal failure of a release run.

    ``detail`` carries the response body of a failed API call. Nothing stored
    here may contain the Authorization header value.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
    detail: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


class PackagingError(OSError):
    """Raised when a directory asset cannot be zipped or removed."""
