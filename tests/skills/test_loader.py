"""Tests for skill body and supporting file loading."""

import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import skillbook.skills.loader as loader
import skillbook.skills.skill as skill

MakeSkill = _typing.Callable[..., _pathlib.Path]


@_pytest.fixture
def record(personal_root: skill.SkillRoot, make_skill: MakeSkill) -> skill.SkillRecord:
    """A skill with a few supporting files."""
    skill_dir = make_skill(personal_root.path, "with-files", body="Do the thing.\n")
    (skill_dir / "example.py").write_text("print('hi')\n")
    (skill_dir / "scripts").mkdir()
    (skill_dir / "scripts" / "run.sh").write_text("#!/bin/sh\n")
    (skill_dir / ".hidden").write_text("secret\n")
    return skill.load_skill_record(skill_dir / "SKILL.md", personal_root)


class TestLoadBody:
    """Tests for load_body."""

    def test_strips_frontmatter(self, record: skill.SkillRecord) -> None:
        """The body has no frontmatter."""
        assert loader.load_body(record) == "Do the thing.\n"

    def test_warns_when_body_is_long(
        self,
        personal_root: skill.SkillRoot,
        make_skill: MakeSkill,
        caplog: _pytest.LogCaptureFixture,
    ) -> None:
        """Bodies over the soft limit load with a warning."""
        skill_dir = make_skill(personal_root.path, "long-skill", body="line\n" * 501)
        long_record = skill.load_skill_record(skill_dir / "SKILL.md", personal_root)

        body = loader.load_body(long_record)

        assert len(body.splitlines()) == 501
        assert "exceeds recommended body limit" in caplog.text

    def test_missing_file_raises(self, record: skill.SkillRecord) -> None:
        """A marker file removed after discovery is an OSError."""
        record.path.unlink()
        with _pytest.raises(OSError):
            loader.load_body(record)


class TestRenderInjection:
    """Tests for render_injection."""

    def test_wraps_body_in_markers(self, record: skill.SkillRecord) -> None:
        """The body is wrapped with name and source root."""
        assert loader.render_injection(record) == (
            '<skill name="with-files" source="user">\nDo the thing.\n</skill>'
        )

    def test_uses_given_body(self, record: skill.SkillRecord) -> None:
        """A pre-loaded body is not re-read."""
        rendered = loader.render_injection(record, body="Custom\n\n")
        assert rendered == '<skill name="with-files" source="user">\nCustom\n</skill>'


class TestSupportingFiles:
    """Tests for supporting file helpers."""

    def test_lists_visible_files(self, record: skill.SkillRecord) -> None:
        """The marker and hidden files are not listed."""
        assert loader.list_supporting_files(record) == ["example.py", "scripts/run.sh"]

    def test_reads_file(self, record: skill.SkillRecord) -> None:
        """Files inside the skill directory can be read."""
        assert loader.read_supporting_file(record, "scripts/run.sh") == "#!/bin/sh\n"

    def test_missing_file_returns_none(self, record: skill.SkillRecord) -> None:
        """A file that does not exist reads as None."""
        assert loader.read_supporting_file(record, "nope.txt") is None

    def test_path_outside_skill_returns_none(
        self, record: skill.SkillRecord, personal_root: skill.SkillRoot
    ) -> None:
        """Paths escaping the skill directory are refused."""
        (personal_root.path / "outside.txt").write_text("outside\n")
        assert loader.supporting_file_path(record, "../outside.txt") is None
        assert loader.read_supporting_file(record, "../outside.txt") is None

    def test_path_is_absolute(self, record: skill.SkillRecord) -> None:
        """Resolved supporting file paths are absolute."""
        path = loader.supporting_file_path(record, "example.py")
        assert path is not None
        assert path.is_absolute()
        assert path.name == "example.py"
