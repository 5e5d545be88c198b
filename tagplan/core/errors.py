"""Error codes for CLI exit status.

These map onto process exit codes so a CI job can tell a bad invocation
apart from a misconfigured pipeline.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad flag, malformed version or bump text)
    - 2: Configuration error (missing registry/app name, invalid config file)
    - 4: Network error (a lookup that was explicitly required failed)
    - 5: I/O error (plan file could not be written)
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
