"""Error codes for CLI exit status.

These values are used as process exit codes and should remain stable:
- 0: Success (including "nothing to build")
- 1: User error (bad configuration, unknown datasource or scheme)
- 3: Build error (at least one version failed to build or publish)
- 4: Network error (release lookup failed, strict tag lookup failed)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    BUILD_ERROR = 3
    NETWORK_ERROR = 4

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        """Check if this code indicates success."""
        return self == ErrorCode.OK
