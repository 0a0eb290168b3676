"""Platform abstraction layer."""

from .process import (
    OutputLine,
    ProcessError,
    run_streaming,
)

__all__ = [
    "OutputLine",
    "ProcessError",
    "run_streaming",
]
