"""
Skill content loading.

Resolution only picks a marker file. This module reads it when the skill
is actually used:
1. Body - the marker file with its frontmatter stripped
2. Supporting files - anything else in the skill directory, on demand

Nothing is cached; each call reads from disk.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib

import skillbook.constants as constants
import skillbook.skills.frontmatter as frontmatter
import skillbook.skills.skill as skill_module

_logger = _logging.getLogger(__name__)


def load_body(record: skill_module.SkillRecord) -> str:
    """
    Read a skill's body.

    Args:
        record: Resolved skill.

    Returns:
        Marker file content without frontmatter.

    Raises:
        OSError: If the marker file cannot be read.
    """
    content = record.path.read_text(encoding="utf-8")
    body = frontmatter.strip_frontmatter(content)

    line_count = len(body.splitlines())
    if line_count > constants.SKILL_BODY_SOFT_LIMIT:
        _logger.warning(
            "Skill %s exceeds recommended body limit (%d lines > %d)",
            record.name,
            line_count,
            constants.SKILL_BODY_SOFT_LIMIT,
        )
    return body


def render_injection(record: skill_module.SkillRecord, body: str | None = None) -> str:
    """
    Wrap a skill body in markers for injection into the agent's context.

    Args:
        record: Resolved skill.
        body: Pre-loaded body. Read from disk when omitted.
    """
    if body is None:
        body = load_body(record)
    return (
        f'<skill name="{record.name}" source="{record.root.alias}">\n'
        f"{body.rstrip()}\n"
        f"</skill>"
    )


def list_supporting_files(record: skill_module.SkillRecord) -> list[str]:
    """
    List files shipped alongside a skill's marker file.

    Returns:
        Paths relative to the skill directory, sorted. Hidden files and
        directories are excluded.
    """
    skill_dir = record.skill_dir
    files: list[str] = []
    for path in sorted(skill_dir.rglob("*")):
        relative = path.relative_to(skill_dir)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path == record.path or not path.is_file():
            continue
        files.append(relative.as_posix())
    return files


def read_supporting_file(
    record: skill_module.SkillRecord,
    relative_path: str,
) -> str | None:
    """
    Read a supporting file.

    Args:
        record: Resolved skill.
        relative_path: Path relative to the skill directory.

    Returns:
        File content, or None if the file does not exist, cannot be read,
        or lies outside the skill directory.
    """
    target = supporting_file_path(record, relative_path)
    if target is None:
        return None
    try:
        return target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _logger.warning("Cannot read %s: %s", target, e)
        return None


def supporting_file_path(
    record: skill_module.SkillRecord,
    relative_path: str,
) -> _pathlib.Path | None:
    """Absolute path of a supporting file, or None if it is not inside the skill."""
    skill_dir = record.skill_dir.resolve()
    target = (skill_dir / relative_path).resolve()
    if not target.is_relative_to(skill_dir) or not target.is_file():
        return None
    return target
