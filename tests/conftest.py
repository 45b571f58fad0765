"""
Shared pytest fixtures for skillbook tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import skillbook.skills as skills


@_pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _pathlib.Path:
    """
    Isolate every test from the user's configuration.

    Clears SKILLBOOK_* variables, points HOME and the config directory at
    temporary directories, and runs the test from an empty directory.
    """
    for key in list(_os.environ):
        if key.startswith("SKILLBOOK_"):
            monkeypatch.delenv(key, raising=False)

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("SKILLBOOK_CONFIG_DIR", str(home / ".config" / "skillbook"))

    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return home


def write_skill(
    parent: _pathlib.Path,
    name: str,
    description: str = "Use when testing",
    body: str | None = None,
    *,
    dirname: str | None = None,
) -> _pathlib.Path:
    """Create a skill directory with a SKILL.md marker file."""
    skill_dir = parent / (dirname or name)
    skill_dir.mkdir(parents=True, exist_ok=True)
    if body is None:
        body = f"# {name}\n\nInstructions for {name}.\n"
    (skill_dir / "SKILL.md").write_text(
        f"---\nname: {name}\ndescription: {description}\n---\n\n{body}",
        encoding="utf-8",
    )
    return skill_dir


@_pytest.fixture
def make_skill() -> _typing.Callable[..., _pathlib.Path]:
    """Factory fixture wrapping write_skill."""
    return write_skill


@_pytest.fixture
def personal_root(tmp_path: _pathlib.Path) -> skills.SkillRoot:
    """Empty personal root (alias user, rank 0)."""
    path = tmp_path / "personal"
    path.mkdir()
    return skills.SkillRoot(alias="user", path=path, rank=0)


@_pytest.fixture
def library_root(tmp_path: _pathlib.Path) -> skills.SkillRoot:
    """Empty library root (alias superpowers, rank 100)."""
    path = tmp_path / "library"
    path.mkdir()
    return skills.SkillRoot(alias="superpowers", path=path, rank=100)
