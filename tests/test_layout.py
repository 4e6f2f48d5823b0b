"""Checks on packaging metadata and module headers."""

import re
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def test_readme_declared_in_pyproject_exists():
    text = (ROOT / "pyproject.toml").read_text(encoding="utf-8")
    match = re.search(r'^readme = "([^"]+)"$', text, re.MULTILINE)
    assert match is not None
    assert match.group(1) == "README.md"
    assert (ROOT / match.group(1)).is_file()


def test_package_modules_start_with_path_comment():
    for path in sorted((ROOT / "bloxel_map").rglob("*.py")):
        rel = path.relative_to(ROOT).as_posix()
        first = path.read_text(encoding="utf-8").splitlines()[0]
        assert first == f"# {rel}", rel
