"""Error presentation utilities.

Centralized error formatting and exit code mapping for release runs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ghrelease.core.errors import ErrorCode
from ghrelease.output.console import Style
from ghrelease.release.errors import ReleaseError

if TYPE_CHECKING:
    from ghrelease.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error with its hint and response body, if any."""
    match error:
        case ReleaseError(kind="configuration", message=message):
            console.error(f"configuration: {message}")
        case ReleaseError(kind="transport", message=message):
            console.error(f"network: {message}")
        case ReleaseError(kind="api", message=message):
            console.error(f"GitHub API: {message}")
        case ReleaseError(kind="packaging", message=message):
            console.error(f"asset: {message}")
    if error.detail:
        console.print(f"response: {error.detail}", Style.DIM)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    """Get exit code for a release error."""
    match error.kind:
        case "configuration":
            return int(ErrorCode.USER_ERROR)
        case "transport" | "api":
            return int(ErrorCode.NETWORK_ERROR)
        case "packaging":
            return int(ErrorCode.IO_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.USER_ERROR)
