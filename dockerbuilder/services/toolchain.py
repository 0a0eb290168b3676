"""Container toolchain invocations (build, push, tag).

Each call runs one docker process to completion, echoing the command and
forwarding its output to the console line by line while it runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from dockerbuilder.core.result import Err, Ok, Result
from dockerbuilder.output.console import Style
from dockerbuilder.platform.process import run_streaming
from dockerbuilder.services.errors import ToolchainError

if TYPE_CHECKING:
    from dockerbuilder.output.console import ConsoleProtocol
    from dockerbuilder.platform.process import OutputLine

__all__ = ["Toolchain", "DockerToolchain", "MockToolchain"]


class Toolchain(Protocol):
    def build(self, image_ref: str, *, build_arg: str, version: str) -> Result[None, ToolchainError]:
        """Build ``image_ref`` passing ``build_arg=version``."""
        ...

    def push(self, image_ref: str) -> Result[None, ToolchainError]:
        """Push a local image to its registry."""
        ...

    def tag(self, source: str, target: str) -> Result[None, ToolchainError]:
        """Add tag ``target`` to local image ``source``."""
        ...


class DockerToolchain:
    """Toolchain backed by the docker CLI."""

    def __init__(
        self,
        console: ConsoleProtocol,
        *,
        docker: str = "docker",
        context: str = ".",
        cwd: Path | None = None,
    ) -> None:
        self._console = console
        self._docker = docker
        self._context = context
        self._cwd = cwd or Path.cwd()

    def _forward(self, line: OutputLine) -> None:
        self._console.stream(line.text, stderr=line.stderr)

    def _docker_cmd(self, args: list[str]) -> Result[None, ToolchainError]:
        cmd = [self._docker, *args]
        self._console.print(" ".join(cmd), Style.DIM)
        result = run_streaming(cmd, cwd=self._cwd, on_output=self._forward)
        if isinstance(result, Err):
            e = result.error
            return Err(
                ToolchainError(
                    command=f"{self._docker} {args[0]}",
                    returncode=e.returncode,
                    message=e.stderr.strip().splitlines()[-1] if e.stderr.strip() else str(e),
                )
            )
        return Ok(None)

    def build(self, image_ref: str, *, build_arg: str, version: str) -> Result[None, ToolchainError]:
        return self._docker_cmd(
            ["build", "--build-arg", f"{build_arg}={version}", self._context, "-t", image_ref]
        )

    def push(self, image_ref: str) -> Result[None, ToolchainError]:
        return self._docker_cmd(["push", image_ref])

    def tag(self, source: str, target: str) -> Result[None, ToolchainError]:
        return self._docker_cmd(["tag", source, target])


def _empty_calls() -> list[tuple[str, ...]]:
    return []


def _empty_failures() -> set[tuple[str, str]]:
    return set()


@dataclass
class MockToolchain:
    """Toolchain that records calls instead of running docker.

    ``failures`` holds ``(operation, image_ref)`` pairs that should fail,
    e.g. ``("build", "renovate/node:20.1.0")``.
    """

    calls: list[tuple[str, ...]] = field(default_factory=_empty_calls)
    failures: set[tuple[str, str]] = field(default_factory=_empty_failures)

    def _call(self, op: str, *args: str) -> Result[None, ToolchainError]:
        self.calls.append((op, *args))
        if (op, args[0]) in self.failures:
            return Err(ToolchainError(command=f"docker {op}", returncode=1, message="mock failure"))
        return Ok(None)

    def build(self, image_ref: str, *, build_arg: str, version: str) -> Result[None, ToolchainError]:
        return self._call("build", image_ref, f"{build_arg}={version}")

    def push(self, image_ref: str) -> Result[None, ToolchainError]:
        return self._call("push", image_ref)

    def tag(self, source: str, target: str) -> Result[None, ToolchainError]:
        return self._call("tag", source, target)
