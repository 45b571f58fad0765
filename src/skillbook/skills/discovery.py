"""
Skill discovery.

Walks each configured root up to a fixed depth and collects every
directory that directly contains the marker file. A skill directory's own
subdirectories hold supporting files, so they are never searched for
further skills.

Discovery degrades gracefully: unreadable directories and invalid marker
files are logged and skipped, so one bad document never hides the rest of
the library. The one hard failure is two skills with the same name inside
a single root, which fails the pass for that root.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import skillbook.constants as constants
import skillbook.skills.skill as skill_module

_logger = _logging.getLogger(__name__)


class DuplicateSkillError(Exception):
    """Raised when two skills in the same root share a name."""

    def __init__(
        self,
        root: skill_module.SkillRoot,
        name: str,
        paths: list[_pathlib.Path],
    ) -> None:
        self.root = root
        self.name = name
        self.paths = paths
        locations = ", ".join(str(p) for p in paths)
        super().__init__(
            f"Duplicate skill name '{name}' in root '{root.alias}': {locations}"
        )


@_dataclasses.dataclass
class DiscoveryResult:
    """Outcome of one discovery pass over several roots."""

    records: list[skill_module.SkillRecord]
    """Records of every root, in root precedence order."""

    errors: list[DuplicateSkillError] = _dataclasses.field(default_factory=list)
    """Roots that failed and contributed no records."""


def _real(path: _pathlib.Path | str) -> str:
    return _os.path.realpath(path)


def find_skills_in_dir(
    root: skill_module.SkillRoot,
    max_depth: int = constants.DEFAULT_MAX_DEPTH,
    *,
    marker_file: str = constants.SKILL_MARKER_FILENAME,
) -> list[skill_module.SkillRecord]:
    """
    Find all skills under a root.

    The root directory is level 0. Directories from level 1 down to
    ``max_depth`` are candidates; hidden directories are skipped.
    Symlinked directories are followed unless they point back at one of
    their own ancestors. A skill reachable through several paths is
    reported once, under the path that sorts first.

    Args:
        root: Root to search.
        max_depth: Deepest directory level searched.
        marker_file: Name of the file that marks a skill directory.

    Returns:
        Records ordered by their directory path relative to the root.

    Raises:
        DuplicateSkillError: If two skills in this root share a name.
    """
    base = root.path
    if not base.is_dir():
        _logger.debug("Skill root %s does not exist, skipping", root)
        return []

    found: list[tuple[str, str, skill_module.SkillRecord]] = []

    def walk(directory: _pathlib.Path, depth: int, ancestors: frozenset[str]) -> None:
        if depth + 1 > max_depth:
            return

        try:
            with _os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            _logger.warning("Skipping unreadable directory %s: %s", directory, e)
            return

        for entry in entries:
            if entry.name.startswith("."):
                continue
            try:
                if not entry.is_dir():
                    continue
            except OSError:
                continue

            child = _pathlib.Path(entry.path)
            real = _real(child)
            if real in ancestors:
                _logger.debug("Symlink cycle at %s, skipping", child)
                continue

            marker = child / marker_file
            if _os.path.isfile(marker):
                try:
                    record = skill_module.load_skill_record(marker, root)
                except (OSError, ValueError) as e:
                    _logger.warning("Skipping invalid skill %s: %s", marker, e)
                    continue
                found.append((child.relative_to(base).as_posix(), _real(marker), record))
                continue

            walk(child, depth + 1, ancestors | {real})

    walk(base, 0, frozenset({_real(base)}))

    found.sort(key=lambda item: item[0])
    seen: set[str] = set()
    records: list[skill_module.SkillRecord] = []
    for relative, real_marker, record in found:
        if real_marker in seen:
            _logger.debug("Skill %s already found under another path", relative)
            continue
        seen.add(real_marker)
        records.append(record)
    _check_unique_names(root, records)
    return records


def _check_unique_names(
    root: skill_module.SkillRoot,
    records: list[skill_module.SkillRecord],
) -> None:
    by_name: dict[str, list[_pathlib.Path]] = {}
    for record in records:
        by_name.setdefault(record.name, []).append(record.path)
    for name, paths in by_name.items():
        if len(paths) > 1:
            raise DuplicateSkillError(root, name, paths)


def discover_skills(
    roots: _typing.Iterable[skill_module.SkillRoot],
    max_depth: int = constants.DEFAULT_MAX_DEPTH,
    *,
    marker_file: str = constants.SKILL_MARKER_FILENAME,
) -> DiscoveryResult:
    """
    Discover skills across several roots.

    Per-root results are concatenated in precedence order. A root that
    fails with DuplicateSkillError contributes nothing and the error is
    kept in the result.

    Args:
        roots: Roots to search.
        max_depth: Deepest directory level searched in each root.
        marker_file: Name of the file that marks a skill directory.

    Returns:
        DiscoveryResult with records and per-root errors.
    """
    result = DiscoveryResult(records=[])

    for root in skill_module.order_roots(roots):
        try:
            records = find_skills_in_dir(root, max_depth, marker_file=marker_file)
        except DuplicateSkillError as e:
            _logger.error("Discovery failed for root %s: %s", root.alias, e)
            result.errors.append(e)
            continue
        _logger.debug("Found %d skills in %s", len(records), root)
        result.records.extend(records)

    return result
