"""Subprocess execution with live output and Result-based error handling.

``run_streaming`` blocks until the command exits while forwarding each line
of stdout/stderr to a callback as soon as it is produced. The callback always
runs on the calling thread; two daemon reader threads only drain the pipes.
The child process is waited on (and killed if still running) on every exit
path, including a callback that raises.

Usage:
    result = run_streaming(["docker", "push", "renovate/node:20.1.0"], cwd=Path("."),
                           on_output=lambda line: print(line.text))
    match result:
        case Ok(_):
            ...
        case Err(error):
            print(f"Failed: {error}")
"""

from __future__ import annotations

import queue
import subprocess
import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from dockerbuilder.core.result import Err, Ok, Result

__all__ = ["OutputLine", "ProcessError", "run_streaming"]

_STDERR_TAIL_LINES = 20


@dataclass(frozen=True, slots=True)
class OutputLine:
    """One line of subprocess output (without the trailing newline)."""

    text: str
    stderr: bool = False


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it could not start).
        stderr: Last lines of standard error, or the OS error message.
    """

    command: tuple[str, ...]
    returncode: int
    stderr: str

    def __str__(self) -> str:
        """Format error for display."""
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def _pump(pipe: IO[str], stderr: bool, sink: queue.Queue[OutputLine | None]) -> None:
    try:
        for line in pipe:
            sink.put(OutputLine(line.rstrip("\r\n"), stderr))
    finally:
        sink.put(None)


def run_streaming(
    cmd: list[str],
    cwd: Path,
    on_output: Callable[[OutputLine], None],
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command, forwarding output lines live.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        on_output: Called with each output line, in arrival order.
        env: Environment variables (uses current env if None).

    Returns:
        Ok(None) on exit status 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd),
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stderr=str(e)))

    assert proc.stdout is not None and proc.stderr is not None
    lines: queue.Queue[OutputLine | None] = queue.Queue()
    readers = [
        threading.Thread(target=_pump, args=(proc.stdout, False, lines), daemon=True),
        threading.Thread(target=_pump, args=(proc.stderr, True, lines), daemon=True),
    ]
    stderr_tail: deque[str] = deque(maxlen=_STDERR_TAIL_LINES)

    try:
        for reader in readers:
            reader.start()

        open_streams = len(readers)
        while open_streams:
            item = lines.get()
            if item is None:
                open_streams -= 1
                continue
            if item.stderr:
                stderr_tail.append(item.text)
            on_output(item)

        returncode = proc.wait()
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
        for reader in readers:
            if reader.ident is not None:
                reader.join()
        proc.stdout.close()
        proc.stderr.close()

    if returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=returncode,
                stderr="\n".join(stderr_tail),
            )
        )

    return Ok(None)
