from __future__ import annotations

from pathlib import Path

import pytest
import typer

from dockerbuilder.cli.context import RunOverrides, build_context
from dockerbuilder.core.config import BuilderConfig
from dockerbuilder.core.errors import ErrorCode
from dockerbuilder.sources.cache import CachingHttpClient


class TestRunOverrides:
    def test_defaults_leave_config_untouched(self) -> None:
        config = BuilderConfig(image="renovate/node", force=True, tag_lookup="optimistic")
        assert RunOverrides().apply(config) == config

    def test_flags_switch_behaviors_on(self) -> None:
        config = BuilderConfig(image="renovate/node")
        applied = RunOverrides(
            image="renovate/other",
            force=True,
            last_only=True,
            build_only=True,
            strict_tags=True,
        ).apply(config)

        assert applied.image == "renovate/other"
        assert applied.force and applied.last_only and applied.build_only
        assert applied.tag_lookup == "strict"
        assert applied.force_unstable is False

    def test_false_flag_does_not_clear_loaded_value(self) -> None:
        config = BuilderConfig(image="renovate/node", build_only=True)
        assert RunOverrides(build_only=False).apply(config).build_only is True


class TestBuildContext:
    def test_loads_from_env(self) -> None:
        ctx = build_context(
            env={"IMAGE": "renovate/node", "DATASOURCE": "npm", "LOOKUP_NAME": "node"},
        )
        assert ctx.config.image == "renovate/node"
        assert ctx.config.datasource == "npm"
        assert ctx.scheme.name == "semver"
        assert isinstance(ctx.http, CachingHttpClient)
        assert len(ctx.cache) == 0
        assert ctx.tags.mode == "optimistic"

    def test_image_flag_satisfies_required_setting(self) -> None:
        ctx = build_context(overrides=RunOverrides(image="renovate/node"), env={})
        assert ctx.config.image == "renovate/node"

    def test_missing_image_is_user_error(self) -> None:
        with pytest.raises(typer.Exit) as exc:
            build_context(env={})
        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)

    def test_unknown_scheme_is_user_error(self) -> None:
        with pytest.raises(typer.Exit) as exc:
            build_context(env={"IMAGE": "renovate/node", "VERSION_SCHEME": "calver"})
        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)

    def test_ci_branch_override(self) -> None:
        ctx = build_context(
            env={"IMAGE": "renovate/node", "CIRCLECI": "true", "CIRCLE_BRANCH": "feature/x"},
        )
        assert ctx.config.build_only and ctx.config.last_only and ctx.config.force

    def test_ci_primary_branch_not_overridden(self) -> None:
        ctx = build_context(
            env={"IMAGE": "renovate/node", "CIRCLECI": "true", "CIRCLE_BRANCH": "master"},
        )
        assert not ctx.config.build_only

    def test_strict_tags_flag(self) -> None:
        ctx = build_context(
            overrides=RunOverrides(strict_tags=True),
            env={"IMAGE": "renovate/node"},
        )
        assert ctx.tags.mode == "strict"

    def test_config_file_is_read(self, tmp_path: Path) -> None:
        path = tmp_path / "builder.toml"
        path.write_text(
            '[builder]\nimage = "renovate/python"\ndatasource = "pypi"\nlookup_name = "cpython"\n',
            encoding="utf-8",
        )
        ctx = build_context(config_path=path, env={"LOOKUP_NAME": "python"})
        assert ctx.config.image == "renovate/python"
        assert ctx.config.lookup_name == "python"
