"""Error codes for CLI exit status.

Each failure class of a release run maps to a stable process exit code so
workflow logs and wrappers can tell a broken changelog from a flaky host.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad arguments)
    - 2: Configuration error (missing context, invalid workspace topology)
    - 3: Parse error (changelog not in the expected format)
    - 4: Remote error (git or release host call failed)
    - 5: I/O error (file could not be read or written)
    - 6: Internal error (inconsistent tool output)
    - 7: Tool error (version or publish command failed)
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    PARSE_ERROR = 3
    REMOTE_ERROR = 4
    IO_ERROR = 5
    INTERNAL_ERROR = 6
    TOOL_ERROR = 7

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
