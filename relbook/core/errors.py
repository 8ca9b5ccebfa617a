"""Process exit codes.

Every command maps its failure onto one of these values so CI workflows can
tell a bad invocation from an unreachable registry.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for relbook commands.

    - 0: Success (including "nothing to release")
    - 1: User error (bad version string, bad flags, missing input file)
    - 2: Environment error (gh/ocm missing, not authenticated)
    - 4: Network error (registry or GitHub unreachable)
    - 5: I/O error (cannot read or write generated files)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
