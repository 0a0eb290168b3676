"""Build execution.

Builds the planned versions one at a time. A failed build, push or tag only
fails that version; the loop moves on and the failure shows up in the final
report and exit code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dockerbuilder.core.errors import ErrorCode
from dockerbuilder.core.result import Err
from dockerbuilder.output.console import Style

if TYPE_CHECKING:
    from dockerbuilder.core.config import BuilderConfig
    from dockerbuilder.output.console import ConsoleProtocol
    from dockerbuilder.services.errors import ToolchainError
    from dockerbuilder.services.resolver import BuildPlan
    from dockerbuilder.services.toolchain import Toolchain

__all__ = ["BuildOutcome", "ExecutionReport", "execute_plan"]


@dataclass(frozen=True, slots=True)
class BuildOutcome:
    version: str
    succeeded: bool
    error: ToolchainError | None = None


@dataclass(frozen=True, slots=True)
class ExecutionReport:
    outcomes: tuple[BuildOutcome, ...] = ()

    @property
    def built(self) -> list[str]:
        return [o.version for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> list[str]:
        return [o.version for o in self.outcomes if not o.succeeded]

    @property
    def exit_code(self) -> ErrorCode:
        return ErrorCode.BUILD_ERROR if self.failed else ErrorCode.OK


def _publish(
    toolchain: Toolchain,
    image: str,
    image_ref: str,
    *,
    tag_latest: bool,
) -> ToolchainError | None:
    pushed = toolchain.push(image_ref)
    if isinstance(pushed, Err):
        return pushed.error
    if not tag_latest:
        return None

    latest_ref = f"{image}:latest"
    tagged = toolchain.tag(image_ref, latest_ref)
    if isinstance(tagged, Err):
        return tagged.error
    pushed_latest = toolchain.push(latest_ref)
    if isinstance(pushed_latest, Err):
        return pushed_latest.error
    return None


def execute_plan(
    policy: BuilderConfig,
    plan: BuildPlan,
    toolchain: Toolchain,
    console: ConsoleProtocol,
) -> ExecutionReport:
    """Build (and unless ``build_only``, publish) every planned version.

    The version equal to ``plan.latest_stable_version`` is additionally
    tagged and pushed as ``{image}:latest`` after its own push succeeds.
    """
    outcomes: list[BuildOutcome] = []

    for version in plan.versions:
        image_ref = f"{policy.image}:{version}"
        console.header(f"Building {image_ref}")

        built = toolchain.build(image_ref, build_arg=policy.effective_build_arg, version=version)
        error = built.error if isinstance(built, Err) else None

        if error is None and not policy.build_only:
            error = _publish(
                toolchain,
                policy.image,
                image_ref,
                tag_latest=version == plan.latest_stable_version,
            )

        if error is not None:
            console.error(f"{image_ref}: {error}")
            outcomes.append(BuildOutcome(version=version, succeeded=False, error=error))
            continue

        console.success(f"Built {image_ref}")
        outcomes.append(BuildOutcome(version=version, succeeded=True))

    report = ExecutionReport(outcomes=tuple(outcomes))
    console.newline()
    console.print("Built: " + (" ".join(report.built) or "(none)"), Style.SUCCESS)
    console.print(
        "Failed: " + (" ".join(report.failed) or "(none)"),
        Style.ERROR if report.failed else Style.DEFAULT,
    )
    return report
