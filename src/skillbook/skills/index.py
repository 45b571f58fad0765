"""
Flat skill index built from one discovery pass.

The index is a table keyed by ``(root alias, skill name)``. It is built
once and reused for every lookup; refreshing it means building a new one.
"""

from __future__ import annotations

import typing as _typing

import skillbook.constants as constants
import skillbook.skills.discovery as discovery
import skillbook.skills.skill as skill_module


class SkillIndex:
    """Lookup table of discovered skills."""

    def __init__(
        self,
        roots: _typing.Iterable[skill_module.SkillRoot],
        records: _typing.Iterable[skill_module.SkillRecord] = (),
        errors: list[discovery.DuplicateSkillError] | None = None,
    ) -> None:
        """
        Initialize the index.

        Args:
            roots: Roots the records were discovered in.
            records: Discovered records.
            errors: Roots that failed during discovery.

        Raises:
            ValueError: If two roots share an alias, a record belongs to a
                root that is not listed, or a name repeats within a root.
        """
        self._roots = skill_module.order_roots(roots)
        self._roots_by_alias: dict[str, skill_module.SkillRoot] = {}
        for root in self._roots:
            if root.alias in self._roots_by_alias:
                raise ValueError(f"Duplicate root alias: {root.alias}")
            self._roots_by_alias[root.alias] = root

        self._table: dict[tuple[str, str], skill_module.SkillRecord] = {}
        for record in records:
            if record.root.alias not in self._roots_by_alias:
                raise ValueError(
                    f"Skill {record.name} belongs to unknown root {record.root.alias}"
                )
            key = (record.root.alias, record.name)
            if key in self._table:
                raise ValueError(f"Duplicate skill {record.qualified_name}")
            self._table[key] = record

        self.errors: list[discovery.DuplicateSkillError] = list(errors or [])

    @classmethod
    def build(
        cls,
        roots: _typing.Iterable[skill_module.SkillRoot],
        max_depth: int = constants.DEFAULT_MAX_DEPTH,
        *,
        marker_file: str = constants.SKILL_MARKER_FILENAME,
    ) -> SkillIndex:
        """Run a discovery pass over ``roots`` and index the result."""
        roots = list(roots)
        result = discovery.discover_skills(roots, max_depth, marker_file=marker_file)
        return cls(roots, result.records, result.errors)

    @property
    def roots(self) -> list[skill_module.SkillRoot]:
        """Indexed roots in precedence order."""
        return list(self._roots)

    def root_for_alias(self, alias: str) -> skill_module.SkillRoot | None:
        """Get a root by alias."""
        return self._roots_by_alias.get(alias)

    def get(self, alias: str, name: str) -> skill_module.SkillRecord | None:
        """Get the record for ``name`` in the root ``alias``."""
        return self._table.get((alias, name))

    def records(self) -> list[skill_module.SkillRecord]:
        """All records, grouped by root in precedence order, then by name."""
        rank = {root.alias: i for i, root in enumerate(self._roots)}
        return sorted(
            self._table.values(),
            key=lambda r: (rank[r.root.alias], r.name),
        )

    def names(self) -> list[str]:
        """Distinct skill names across all roots, sorted."""
        return sorted({name for _, name in self._table})

    def effective_records(self) -> list[skill_module.SkillRecord]:
        """The record that wins for each name, sorted by name."""
        winners: list[skill_module.SkillRecord] = []
        for name in self.names():
            for root in self._roots:
                record = self._table.get((root.alias, name))
                if record is not None:
                    winners.append(record)
                    break
        return winners

    def shadowed_records(self) -> list[skill_module.SkillRecord]:
        """Records hidden by a same-named skill in a higher-precedence root."""
        winners = {(r.root.alias, r.name) for r in self.effective_records()}
        return [r for r in self.records() if (r.root.alias, r.name) not in winners]

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: object) -> bool:
        return key in self._table
