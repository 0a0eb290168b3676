"""Build-list resolution.

Turns the upstream release list plus the version policy into the ordered
list of versions that need an image, and picks the version that should
carry the floating ``latest`` tag.

Steps:
1. enumerate releases; keep valid versions, strip one leading ``v``
2. order ascending, drop versions below ``start_version`` or ignored
3. latest stable = upstream hint, else newest stable survivor
4. most recent = newest survivor, stable or not
5. ``last_only`` collapses candidates to the most recent version
6. ``force`` skips registry checks (stable + most recent, or everything
   with ``force_unstable``); otherwise keep versions whose tag is missing

Duplicate upstream versions are not collapsed; each copy is planned.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from dockerbuilder.core.result import Err, Ok, Result
from dockerbuilder.output.console import Style
from dockerbuilder.services.errors import InvalidPolicy, ResolveError

if TYPE_CHECKING:
    from dockerbuilder.core.config import BuilderConfig
    from dockerbuilder.output.console import ConsoleProtocol
    from dockerbuilder.registry.tags import TagLookupError
    from dockerbuilder.sources.datasources import ReleaseLookupError, ReleaseSet
    from dockerbuilder.versioning import VersionScheme

__all__ = ["BuildPlan", "ReleaseLookup", "TagExistsCheck", "compute_build_plan", "strip_v_prefix"]

ReleaseLookup: TypeAlias = "Callable[[], Result[ReleaseSet, ReleaseLookupError]]"
TagExistsCheck: TypeAlias = "Callable[[str, str], Result[bool, TagLookupError]]"


@dataclass(frozen=True, slots=True)
class BuildPlan:
    """Versions to build, ascending, and the version to tag ``latest``.

    Attributes:
        versions: Versions to build, oldest first.
        latest_stable_version: Version that gets re-tagged ``latest``;
            None when no stable version survived filtering.
        most_recent_version: Newest version that survived filtering.
    """

    versions: tuple[str, ...] = ()
    latest_stable_version: str | None = None
    most_recent_version: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.versions


def strip_v_prefix(version: str) -> str:
    return version[1:] if version.startswith("v") else version


def _report(console: ConsoleProtocol, versions: list[str]) -> None:
    if versions:
        console.print("Build list: " + " ".join(versions), Style.INFO)
    else:
        console.print("Nothing to build", Style.INFO)


def compute_build_plan(
    policy: BuilderConfig,
    lookup: ReleaseLookup,
    scheme: VersionScheme,
    tag_exists: TagExistsCheck,
    console: ConsoleProtocol,
) -> Result[BuildPlan, ResolveError]:
    """Compute the build plan for one run.

    Args:
        policy: Run configuration (start version, ignores, force flags, image)
        lookup: Enumerates upstream releases
        scheme: Version validity, ordering, stability and bound checks
        tag_exists: ``(image, version) -> exists``; called once per candidate,
            in ascending order, only when not forcing
        console: Progress output

    Returns:
        Ok(BuildPlan), possibly empty; Err on an invalid policy, a failed
        release lookup, or a failed tag lookup the checker reports as fatal.
    """
    start = policy.start_version
    if start and not scheme.is_valid_bound(start):
        return Err(
            InvalidPolicy(
                message=f"start version {start!r} is not valid for scheme {scheme.name}",
                hint="Fix START_VERSION or VERSION_SCHEME",
            )
        )

    console.print("Looking up versions")
    looked_up = lookup()
    if isinstance(looked_up, Err):
        return looked_up
    releases = looked_up.value

    all_versions = [strip_v_prefix(v) for v in releases.versions if scheme.is_version(v)]
    console.print(f"Found {len(all_versions)} total versions")
    if not all_versions:
        _report(console, [])
        return Ok(BuildPlan())

    ignored = {strip_v_prefix(v) for v in policy.ignored_versions}
    in_range = [
        v
        for v in scheme.sort(all_versions)
        if not (start and scheme.is_less_than_range(v, start)) and v not in ignored
    ]
    console.print(f"Found {len(in_range)} versions within our range")
    if not in_range:
        _report(console, [])
        return Ok(BuildPlan())

    stable = [v for v in in_range if scheme.is_stable(v)]
    if releases.latest_version:
        latest_stable: str | None = strip_v_prefix(releases.latest_version)
    else:
        latest_stable = stable[-1] if stable else None
    if latest_stable is None:
        console.print("No stable version found; latest will not be tagged", Style.WARNING)
    else:
        console.print(f"Latest stable version is {latest_stable}")

    most_recent = in_range[-1]
    console.print(f"Most recent version is {most_recent}")

    candidates = in_range
    if policy.last_only:
        console.print("Building last version only")
        candidates = [most_recent]

    build_list: list[str] = []
    if policy.force:
        if policy.force_unstable:
            console.print("Force building all versions")
            build_list = list(candidates)
        else:
            console.print("Force building all stable versions")
            build_list = [v for v in candidates if v == most_recent or scheme.is_stable(v)]
    else:
        console.print("Checking to see which versions need to be built")
        for version in candidates:
            exists = tag_exists(policy.image, version)
            if isinstance(exists, Err):
                return exists
            if exists.value:
                console.print(f"  {version}: already published", Style.DIM)
            else:
                console.print(f"  {version}: missing", Style.DIM)
                build_list.append(version)

    _report(console, build_list)
    return Ok(
        BuildPlan(
            versions=tuple(build_list),
            latest_stable_version=latest_stable,
            most_recent_version=most_recent,
        )
    )
