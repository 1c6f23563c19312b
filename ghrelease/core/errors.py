"""Process exit codes for the ghrelease CLI.

A build runner only sees the exit status, so each failure class of a release
run maps to one stable code.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for ghrelease commands.

    - 0: Release created and every asset uploaded
    - 1: User error (missing owner/repo/token, unreadable config)
    - 4: Network error (transport failure or non-2xx API response)
    - 5: I/O error (asset could not be read, zipped or removed)
    """

    OK = 0
    USER_ERROR = 1
    NETWORK_ERROR = 4
    IO_ERROR = 5
