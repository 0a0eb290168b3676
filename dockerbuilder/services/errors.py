from __future__ import annotations

from dataclasses import dataclass

from dockerbuilder.registry.tags import TagLookupError
from dockerbuilder.sources.datasources import ReleaseLookupError


@dataclass(frozen=True, slots=True)
class InvalidPolicy:
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ToolchainError:
    """A docker invocation that did not exit cleanly."""

    command: str
    returncode: int
    message: str

    def __str__(self) -> str:
        return f"{self.command} failed (exit {self.returncode}): {self.message}"


ResolveError = InvalidPolicy | ReleaseLookupError | TagLookupError
