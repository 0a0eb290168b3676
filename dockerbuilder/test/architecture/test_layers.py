from __future__ import annotations

import ast
from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parents[2]


def _source_files() -> list[Path]:
    files: list[Path] = []
    for path in sorted(PACKAGE_ROOT.rglob("*.py")):
        rel = path.relative_to(PACKAGE_ROOT)
        if rel.parts[0] == "test" or "__pycache__" in rel.parts:
            continue
        files.append(path)
    return files


def _imports(path: Path) -> list[tuple[str, int]]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    found: list[tuple[str, int]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            found.extend((alias.name, node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and not node.level:
            found.append((node.module, node.lineno))
    return found


def _offenders(prefix: str, allowed: set[str]) -> list[str]:
    offenders: list[str] = []
    for path in _source_files():
        rel = path.relative_to(PACKAGE_ROOT).as_posix()
        if any(rel == a or rel.startswith(a + "/") for a in allowed):
            continue
        for module, line in _imports(path):
            if module == prefix or module.startswith(prefix + "."):
                offenders.append(f"{rel}:{line} imports {module}")
    return offenders


def test_package_has_sources() -> None:
    assert any(p.name == "resolver.py" for p in _source_files())


def test_only_cli_imports_cli() -> None:
    assert _offenders("dockerbuilder.cli", {"cli"}) == []


def test_typer_stays_in_cli() -> None:
    assert _offenders("typer", {"cli"}) == []


def test_rich_only_behind_console() -> None:
    assert _offenders("rich", {"output/console.py"}) == []


def test_subprocess_only_in_platform() -> None:
    assert _offenders("subprocess", {"platform/process.py"}) == []


def test_network_io_only_in_http_client() -> None:
    assert _offenders("urllib.request", {"sources/http.py"}) == []
