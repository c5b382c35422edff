"""Error codes for CLI exit status.

Each family of release failure maps to one stable exit code so wrapper
scripts can tell an operator mistake from a broken environment or a
half-finished publish.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the release commands.

    - 0: Success
    - 1: User error (bad version, wrong branch)
    - 2: Environment error (gh missing or unauthenticated, bad config)
    - 3: State error (dirty tree, wrong release commit)
    - 4: Check error (provision/lint/docs/spelling gates, changelog metadata)
    - 5: Publish error (tag, tarball, upload, push, GitHub release)
    - 6: I/O error (file not found, permission denied)
    - 130: Cancelled by the operator
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    STATE_ERROR = 3
    CHECK_ERROR = 4
    PUBLISH_ERROR = 5
    IO_ERROR = 6
    CANCELLED = 130
