"""
Skill roots and skill records.

A skill is a directory containing a SKILL.md marker file. The marker's
frontmatter carries the skill name and description; the body holds the
instructions. Records are created once per discovery pass and never mutated.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import re as _re
import typing as _typing

import pydantic as _pydantic

import skillbook.constants as constants
import skillbook.skills.frontmatter as frontmatter

_logger = _logging.getLogger(__name__)

# YAML block scalar indicators (|, >, |-, >+ ...); only single-line values are read
_BLOCK_SCALAR_RE = _re.compile(r"^[|>][+-]?$")


class SkillRoot(_pydantic.BaseModel):
    """
    One configured search location.

    Roots are ordered by rank: when two roots contain a skill with the
    same name, the root with the lower rank wins.
    """

    model_config = _pydantic.ConfigDict(frozen=True)

    alias: str = _pydantic.Field(
        ...,
        min_length=1,
        pattern=constants.SKILL_NAME_PATTERN,
        description="Name used to qualify lookups (alias:skill-name)",
    )

    path: _pathlib.Path = _pydantic.Field(
        ...,
        description="Directory searched for skills",
    )

    rank: int = _pydantic.Field(
        default=0,
        description="Precedence rank (lower wins)",
    )

    def __str__(self) -> str:
        return f"{self.alias} ({self.path})"


def order_roots(roots: _typing.Iterable[SkillRoot]) -> list[SkillRoot]:
    """Sort roots by precedence. Equal ranks keep their given order."""
    return sorted(roots, key=lambda r: r.rank)


class SkillRecord(_pydantic.BaseModel):
    """
    A discovered skill.

    Names are validated on creation, so a skill named ``My_Skill`` is
    rejected while the library is being registered rather than when it is
    looked up.
    """

    model_config = _pydantic.ConfigDict(frozen=True)

    name: str = _pydantic.Field(
        ...,
        min_length=1,
        max_length=constants.SKILL_NAME_MAX_LENGTH,
        pattern=constants.SKILL_NAME_PATTERN,
        description="Skill name (lowercase, digits, hyphens)",
    )

    description: str = _pydantic.Field(
        default="",
        max_length=constants.SKILL_DESCRIPTION_MAX_LENGTH,
        description="What the skill does and when to use it",
    )

    path: _pathlib.Path = _pydantic.Field(
        ...,
        description="Absolute path of the marker file",
    )

    root: SkillRoot = _pydantic.Field(
        ...,
        description="Root the skill was discovered in",
    )

    @_pydantic.field_validator("path")
    @classmethod
    def _require_absolute(cls, value: _pathlib.Path) -> _pathlib.Path:
        if not value.is_absolute():
            raise ValueError(f"skill path must be absolute: {value}")
        return value

    @property
    def skill_dir(self) -> _pathlib.Path:
        """Directory holding the marker file and supporting files."""
        return self.path.parent

    @property
    def qualified_name(self) -> str:
        """Name qualified with the root alias (``alias:name``)."""
        return f"{self.root.alias}{constants.QUALIFIER_SEPARATOR}{self.name}"

    def get_metadata_for_prompt(self) -> str:
        """Name and description line for the system prompt."""
        if not self.description:
            return f"**{self.name}**"
        return f"**{self.name}**: {self.description}"

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "qualified_name": self.qualified_name,
            "description": self.description,
            "path": str(self.path),
            "root": self.root.alias,
            "rank": self.root.rank,
        }


def load_skill_record(
    marker_path: _pathlib.Path,
    root: SkillRoot,
) -> SkillRecord:
    """
    Build a record from a marker file.

    The name comes from the frontmatter ``name`` key, falling back to the
    skill directory's name.

    Args:
        marker_path: Path to the SKILL.md file.
        root: Root the file was found under.

    Returns:
        The validated record.

    Raises:
        OSError: If the marker file cannot be read.
        ValueError: If the name or description is invalid.
    """
    content = marker_path.read_text(encoding="utf-8")
    meta = frontmatter.extract_frontmatter(content)
    for key, value in meta.items():
        if _BLOCK_SCALAR_RE.match(value):
            _logger.debug(
                "%s: block-style value for %r is not supported, read as %r",
                marker_path,
                key,
                value,
            )

    name = meta.get("name") or marker_path.parent.name
    description = meta.get("description", "")

    try:
        return SkillRecord(
            name=name,
            description=description,
            path=marker_path.absolute(),
            root=root,
        )
    except _pydantic.ValidationError as e:
        raise ValueError(f"Invalid skill {marker_path}: {e}") from e
