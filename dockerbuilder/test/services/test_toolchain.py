from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from dockerbuilder.core.result import Err, Ok, Result
from dockerbuilder.output.console import MockConsole, Style
from dockerbuilder.platform.process import OutputLine, ProcessError
from dockerbuilder.services.toolchain import DockerToolchain, MockToolchain


class FakeRunner:
    def __init__(self, returncode: int = 0, output: list[OutputLine] | None = None) -> None:
        self.returncode = returncode
        self.output = output or []
        self.commands: list[list[str]] = []

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        on_output: Callable[[OutputLine], None],
        env: dict[str, str] | None = None,
    ) -> Result[None, ProcessError]:
        self.commands.append(cmd)
        for line in self.output:
            on_output(line)
        if self.returncode:
            return Err(ProcessError(tuple(cmd), self.returncode, "denied: requested access"))
        return Ok(None)


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    import dockerbuilder.services.toolchain as toolchain_mod

    fake = FakeRunner()
    monkeypatch.setattr(toolchain_mod, "run_streaming", fake)
    return fake


class TestDockerToolchain:
    def test_build_command(self, runner: FakeRunner, tmp_path: Path) -> None:
        console = MockConsole()
        toolchain = DockerToolchain(console, context="images/node", cwd=tmp_path)

        result = toolchain.build("renovate/node:20.1.0", build_arg="NODE_VERSION", version="20.1.0")

        assert result == Ok(None)
        assert runner.commands == [
            [
                "docker",
                "build",
                "--build-arg",
                "NODE_VERSION=20.1.0",
                "images/node",
                "-t",
                "renovate/node:20.1.0",
            ]
        ]
        assert console.outputs[0].style == Style.DIM
        assert console.outputs[0].message.startswith("docker build")

    def test_push_and_tag_commands(self, runner: FakeRunner) -> None:
        toolchain = DockerToolchain(MockConsole(), docker="podman")
        toolchain.push("renovate/node:20.1.0")
        toolchain.tag("renovate/node:20.1.0", "renovate/node:latest")
        assert runner.commands == [
            ["podman", "push", "renovate/node:20.1.0"],
            ["podman", "tag", "renovate/node:20.1.0", "renovate/node:latest"],
        ]

    def test_output_is_forwarded(self, runner: FakeRunner) -> None:
        runner.output = [OutputLine("Step 1/3"), OutputLine("warning: slow", stderr=True)]
        console = MockConsole()

        DockerToolchain(console).push("renovate/node:20.1.0")

        assert console.count(Style.STREAM) == 1
        assert console.count(Style.STREAM_ERR) == 1

    def test_failure_maps_to_toolchain_error(self, runner: FakeRunner) -> None:
        runner.returncode = 1

        result = DockerToolchain(MockConsole()).push("renovate/node:20.1.0")

        assert isinstance(result, Err)
        assert result.error.command == "docker push"
        assert result.error.returncode == 1
        assert "denied" in str(result.error)


def test_mock_toolchain_records_and_fails() -> None:
    toolchain = MockToolchain(failures={("push", "img:1")})
    assert toolchain.build("img:1", build_arg="A", version="1") == Ok(None)
    assert isinstance(toolchain.push("img:1"), Err)
    assert toolchain.calls == [("build", "img:1", "A=1"), ("push", "img:1")]
