from __future__ import annotations

from dockerbuilder.core.config import BuilderConfig
from dockerbuilder.core.errors import ErrorCode
from dockerbuilder.output.console import MockConsole
from dockerbuilder.services.executor import BuildOutcome, ExecutionReport, execute_plan
from dockerbuilder.services.resolver import BuildPlan
from dockerbuilder.services.toolchain import MockToolchain

IMAGE = "renovate/tool"


def _run(
    plan: BuildPlan,
    toolchain: MockToolchain | None = None,
    console: MockConsole | None = None,
    **policy: object,
) -> tuple[ExecutionReport, MockToolchain, MockConsole]:
    toolchain = toolchain or MockToolchain()
    console = console or MockConsole()
    config = BuilderConfig(image=IMAGE, **policy)  # type: ignore[arg-type]
    return execute_plan(config, plan, toolchain, console), toolchain, console


class TestExecutionReport:
    def test_empty_is_success(self) -> None:
        report = ExecutionReport()
        assert report.built == [] and report.failed == []
        assert report.exit_code == ErrorCode.OK

    def test_any_failure_is_build_error(self) -> None:
        report = ExecutionReport(
            outcomes=(BuildOutcome("1.0.0", succeeded=True), BuildOutcome("1.1.0", succeeded=False))
        )
        assert report.built == ["1.0.0"]
        assert report.failed == ["1.1.0"]
        assert report.exit_code == ErrorCode.BUILD_ERROR


def test_empty_plan_runs_nothing() -> None:
    report, toolchain, console = _run(BuildPlan())
    assert toolchain.calls == []
    assert report.exit_code == ErrorCode.OK
    assert console.find("Built: (none)")
    assert console.find("Failed: (none)")


def test_builds_pushes_and_tags_latest() -> None:
    plan = BuildPlan(versions=("1.0.0", "1.1.0"), latest_stable_version="1.1.0")

    report, toolchain, _ = _run(plan, build_arg="TOOL_VERSION")

    assert toolchain.calls == [
        ("build", f"{IMAGE}:1.0.0", "TOOL_VERSION=1.0.0"),
        ("push", f"{IMAGE}:1.0.0"),
        ("build", f"{IMAGE}:1.1.0", "TOOL_VERSION=1.1.0"),
        ("push", f"{IMAGE}:1.1.0"),
        ("tag", f"{IMAGE}:1.1.0", f"{IMAGE}:latest"),
        ("push", f"{IMAGE}:latest"),
    ]
    assert report.built == ["1.0.0", "1.1.0"]


def test_default_build_arg_derived_from_image() -> None:
    _, toolchain, _ = _run(BuildPlan(versions=("1.0.0",)))
    assert toolchain.calls[0] == ("build", f"{IMAGE}:1.0.0", "TOOL_VERSION=1.0.0")


def test_build_only_never_pushes_or_tags() -> None:
    plan = BuildPlan(versions=("1.1.0",), latest_stable_version="1.1.0")
    _, toolchain, _ = _run(plan, build_only=True)
    assert [c[0] for c in toolchain.calls] == ["build"]


def test_no_latest_tag_without_latest_stable() -> None:
    plan = BuildPlan(versions=("2.0.0-rc1",), latest_stable_version=None)
    _, toolchain, _ = _run(plan)
    assert all(c[0] != "tag" for c in toolchain.calls)


def test_failure_does_not_stop_later_versions() -> None:
    toolchain = MockToolchain(failures={("build", f"{IMAGE}:1.0.0")})
    plan = BuildPlan(versions=("1.0.0", "1.1.0"), latest_stable_version="1.1.0")

    report, toolchain, console = _run(plan, toolchain)

    assert report.failed == ["1.0.0"]
    assert report.built == ["1.1.0"]
    assert report.exit_code == ErrorCode.BUILD_ERROR
    assert ("push", f"{IMAGE}:1.0.0") not in toolchain.calls
    assert ("tag", f"{IMAGE}:1.1.0", f"{IMAGE}:latest") in toolchain.calls
    assert console.find("Failed: 1.0.0")
    assert console.find("Built: 1.1.0")


def test_failed_latest_version_is_not_retagged() -> None:
    toolchain = MockToolchain(failures={("build", f"{IMAGE}:1.1.0")})
    plan = BuildPlan(versions=("1.0.0", "1.1.0"), latest_stable_version="1.1.0")

    report, toolchain, _ = _run(plan, toolchain)

    assert report.built == ["1.0.0"]
    assert all(c[0] != "tag" for c in toolchain.calls)


def test_push_failure_marks_version_failed() -> None:
    toolchain = MockToolchain(failures={("push", f"{IMAGE}:latest")})
    plan = BuildPlan(versions=("1.1.0",), latest_stable_version="1.1.0")

    report, _, console = _run(plan, toolchain)

    assert report.failed == ["1.1.0"]
    assert console.has_error()
