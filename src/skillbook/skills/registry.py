"""
Skill registry for managing available skills.

The registry coordinates discovery, resolution and loading, and provides
the interface used by the session-start injector, the ``/skill`` command
and the CLI.
"""

from __future__ import annotations

import typing as _typing

import skillbook.constants as constants
import skillbook.skills.index as index_module
import skillbook.skills.loader as loader
import skillbook.skills.resolver as resolver
import skillbook.skills.skill as skill_module

if _typing.TYPE_CHECKING:
    import skillbook.config as _config


class SkillRegistry:
    """
    Registry for managing skills.

    Handles:
    - Discovery across configured roots (once, until rediscovered)
    - Name resolution with shadowing
    - Loading skill bodies for injection
    """

    def __init__(
        self,
        roots: _typing.Sequence[skill_module.SkillRoot],
        *,
        max_depth: int = constants.DEFAULT_MAX_DEPTH,
        marker_file: str = constants.SKILL_MARKER_FILENAME,
    ) -> None:
        """
        Initialize the skill registry.

        Args:
            roots: Roots to discover skills in.
            max_depth: Deepest directory level searched in each root.
            marker_file: Name of the file that marks a skill directory.
        """
        self._roots = skill_module.order_roots(roots)
        self._max_depth = max_depth
        self._marker_file = marker_file
        self._index: index_module.SkillIndex | None = None
        self._resolver: resolver.SkillResolver | None = None

    @classmethod
    def from_settings(cls, settings: _config.Settings) -> SkillRegistry:
        """Create a registry from configured roots and discovery options."""
        return cls(
            settings.get_skill_roots(),
            max_depth=settings.discovery.max_depth,
            marker_file=settings.discovery.marker_file,
        )

    def _ensure_discovered(self) -> resolver.SkillResolver:
        """Ensure skills have been discovered."""
        if self._resolver is None:
            self._index = index_module.SkillIndex.build(
                self._roots,
                self._max_depth,
                marker_file=self._marker_file,
            )
            self._resolver = resolver.SkillResolver(self._index)
        return self._resolver

    def discover(self) -> None:
        """Force re-discovery of skills."""
        self._index = None
        self._resolver = None
        self._ensure_discovered()

    @property
    def roots(self) -> list[skill_module.SkillRoot]:
        return list(self._roots)

    @property
    def index(self) -> index_module.SkillIndex:
        """The index of the current discovery pass."""
        self._ensure_discovered()
        assert self._index is not None
        return self._index

    # Listing
    def list_skills(self) -> list[skill_module.SkillRecord]:
        """
        List the skills a bare name would resolve to.

        Returns:
            One record per name, sorted by name.
        """
        return self.index.effective_records()

    def available_names(self) -> list[str]:
        """Names that resolve to a skill, sorted."""
        return self.index.names()

    # Lookup
    def get_skill(self, name: str) -> skill_module.SkillRecord | None:
        """
        Get a skill by bare or qualified name.

        Args:
            name: Skill name, optionally ``alias:name``.

        Returns:
            Resolved record, or None if not found.

        Raises:
            resolver.AmbiguousQualifierError: If the alias is not configured.
        """
        return self._ensure_discovered().resolve(name)

    def has_skill(self, name: str) -> bool:
        """Check if a skill exists."""
        return self.get_skill(name) is not None

    def suggest(self, name: str) -> list[str]:
        """Names to offer when ``name`` was not found."""
        return self._ensure_discovered().suggest(name)

    # Content
    def get_body(self, name: str) -> str | None:
        """
        Get a skill's body without frontmatter.

        Returns:
            The body, or None if not found.
        """
        record = self.get_skill(name)
        if record is None:
            return None
        return loader.load_body(record)

    def trigger_skill(self, name: str) -> str | None:
        """
        Resolve a skill and get its content for injection.

        Returns:
            Skill content wrapped in markers, or None if not found.
        """
        record = self.get_skill(name)
        if record is None:
            return None
        return loader.render_injection(record)

    def get_metadata_for_prompt(self) -> str:
        """
        Get metadata for all skills.

        Returns a compact listing with name and description for each
        skill, suitable for inclusion in the system prompt.
        """
        records = self.list_skills()
        if not records:
            return ""

        lines = ["## Available Skills", ""]
        for record in records:
            lines.append(record.get_metadata_for_prompt())
        lines.append("")
        lines.append(
            "To use a skill, request it with /skill <name>. "
            "Use /skill <root>:<name> to bypass a personal override."
        )
        return "\n".join(lines)

    # Serialization
    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        index = self.index
        return {
            "roots": [
                {
                    "alias": root.alias,
                    "path": str(root.path),
                    "rank": root.rank,
                    "exists": root.path.is_dir(),
                }
                for root in index.roots
            ],
            "skill_count": len(index.names()),
            "skills": [r.to_dict() for r in index.effective_records()],
            "shadowed": [r.to_dict() for r in index.shadowed_records()],
            "errors": [str(e) for e in index.errors],
        }
