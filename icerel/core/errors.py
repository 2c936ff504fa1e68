"""Process exit codes.

The CLI maps every failure kind onto one of these values so CI logs and
downstream jobs can tell a bad tag from a version mismatch from a broken
build without parsing text.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    Values are part of the CLI contract and must stay stable:
    - 0: Success
    - 1: User error (unparseable tag, malformed version/rc, unknown trigger)
    - 2: Consistency error (declared project version disagrees or is unreadable)
    - 3: Build error (poetry or cibuildwheel failed)
    - 5: I/O error (bundle store, output file, config file)
    """

    OK = 0
    USER_ERROR = 1
    CONSISTENCY_ERROR = 2
    BUILD_ERROR = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
