"""
Skill name resolution.

A request is either a bare name (``my-skill``) or a name qualified with a
root alias (``superpowers:my-skill``). Bare names are looked up in every
root in precedence order, so a personal skill shadows a library skill of
the same name. Qualified names look in the named root only.

Not finding a skill is a normal outcome and returns None. Qualifying with
an alias that no configured root has is a configuration error and raises
AmbiguousQualifierError.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import difflib as _difflib
import pathlib as _pathlib
import typing as _typing

import skillbook.constants as constants
import skillbook.skills.index as index_module
import skillbook.skills.skill as skill_module


class AmbiguousQualifierError(ValueError):
    """Raised when a qualified name uses an alias no root is configured with."""

    def __init__(self, qualifier: str, known_aliases: list[str]) -> None:
        self.qualifier = qualifier
        self.known_aliases = known_aliases
        known = ", ".join(known_aliases) or "(none)"
        super().__init__(
            f"Unknown skill root '{qualifier}'. Configured roots: {known}"
        )


@_dataclasses.dataclass(frozen=True)
class ResolutionRequest:
    """A parsed lookup request."""

    name: str
    """Skill name without qualifier."""

    qualifier: str | None = None
    """Root alias the lookup is restricted to, if any."""

    @property
    def is_qualified(self) -> bool:
        return self.qualifier is not None


def parse_skill_reference(reference: str) -> ResolutionRequest:
    """
    Split ``alias:name`` into its parts.

    Args:
        reference: Bare or qualified skill name.

    Returns:
        The parsed request. Surrounding whitespace is ignored.
    """
    reference = reference.strip()
    qualifier, sep, name = reference.partition(constants.QUALIFIER_SEPARATOR)
    if not sep:
        return ResolutionRequest(name=reference)
    return ResolutionRequest(name=name, qualifier=qualifier)


def resolve_skill(
    name: str,
    roots: _typing.Sequence[skill_module.SkillRoot],
    index: index_module.SkillIndex,
) -> skill_module.SkillRecord | None:
    """
    Pick the skill a name refers to.

    Args:
        name: Bare or qualified skill name.
        roots: Roots to consider. Bare names are searched in rank order.
        index: Index built by a discovery pass.

    Returns:
        The winning record, or None if no considered root has the name.

    Raises:
        AmbiguousQualifierError: If the qualifier matches no root in ``roots``.
    """
    request = parse_skill_reference(name)

    if request.qualifier is not None:
        for root in roots:
            if root.alias == request.qualifier:
                return index.get(root.alias, request.name)
        raise AmbiguousQualifierError(
            request.qualifier, [root.alias for root in roots]
        )

    for root in skill_module.order_roots(roots):
        record = index.get(root.alias, request.name)
        if record is not None:
            return record
    return None


def resolve_skill_path(
    name: str,
    roots: _typing.Sequence[skill_module.SkillRoot],
    index: index_module.SkillIndex,
) -> _pathlib.Path | None:
    """
    Resolve a name to the path of its marker file.

    See resolve_skill for lookup rules.
    """
    record = resolve_skill(name, roots, index)
    return record.path if record is not None else None


class SkillResolver:
    """Resolver bound to an index and its roots."""

    def __init__(
        self,
        index: index_module.SkillIndex,
        roots: _typing.Sequence[skill_module.SkillRoot] | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            index: Index to resolve against.
            roots: Roots to consider. Defaults to all indexed roots.
        """
        self._index = index
        self._roots = list(roots) if roots is not None else index.roots

    @property
    def roots(self) -> list[skill_module.SkillRoot]:
        return list(self._roots)

    def resolve(self, name: str) -> skill_module.SkillRecord | None:
        """Resolve a bare or qualified name to a record."""
        return resolve_skill(name, self._roots, self._index)

    def resolve_path(self, name: str) -> _pathlib.Path | None:
        """Resolve a bare or qualified name to a marker file path."""
        return resolve_skill_path(name, self._roots, self._index)

    def suggest(self, name: str, *, limit: int = 3) -> list[str]:
        """
        Suggest names for a failed lookup.

        Close matches come first, followed by every other available name.
        """
        request = parse_skill_reference(name)
        available = [r.name for r in self._index.effective_records()]
        close = _difflib.get_close_matches(request.name, available, n=limit)
        return close + [n for n in available if n not in close]
