"""
Tests for skill name resolution.

Tests verify that:
- Bare names follow root precedence (shadowing)
- Qualified names look only in the named root
- Missing skills resolve to None in both forms
- Unknown qualifiers raise AmbiguousQualifierError
"""

import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import skillbook.skills.index as index
import skillbook.skills.resolver as resolver
import skillbook.skills.skill as skill

MakeSkill = _typing.Callable[..., _pathlib.Path]


@_pytest.fixture
def shadowed_index(
    personal_root: skill.SkillRoot,
    library_root: skill.SkillRoot,
    make_skill: MakeSkill,
) -> index.SkillIndex:
    """Library and personal roots both holding condition-based-waiting."""
    make_skill(
        library_root.path / "testing",
        "condition-based-waiting",
        description="Use when " + "x" * 471,
        body="Library body\n",
    )
    make_skill(library_root.path, "brainstorming")
    make_skill(
        personal_root.path,
        "condition-based-waiting",
        body="Personal body\n",
    )
    return index.SkillIndex.build([personal_root, library_root])


class TestParseSkillReference:
    """Tests for parse_skill_reference."""

    def test_bare_name(self) -> None:
        """A name without a colon is unqualified."""
        request = resolver.parse_skill_reference("my-skill")
        assert request == resolver.ResolutionRequest(name="my-skill")
        assert not request.is_qualified

    def test_qualified_name(self) -> None:
        """The part before the first colon is the qualifier."""
        request = resolver.parse_skill_reference(" superpowers:my-skill ")
        assert request.qualifier == "superpowers"
        assert request.name == "my-skill"
        assert request.is_qualified


class TestResolveSkill:
    """Tests for resolve_skill and resolve_skill_path."""

    def test_bare_name_prefers_personal_root(
        self,
        shadowed_index: index.SkillIndex,
        personal_root: skill.SkillRoot,
        library_root: skill.SkillRoot,
    ) -> None:
        """A personal skill shadows the library skill of the same name."""
        path = resolver.resolve_skill_path(
            "condition-based-waiting", [personal_root, library_root], shadowed_index
        )
        assert path == (personal_root.path / "condition-based-waiting" / "SKILL.md").absolute()

    def test_qualified_name_reaches_shadowed_skill(
        self,
        shadowed_index: index.SkillIndex,
        personal_root: skill.SkillRoot,
        library_root: skill.SkillRoot,
    ) -> None:
        """Qualifying with the library alias bypasses shadowing."""
        path = resolver.resolve_skill_path(
            "superpowers:condition-based-waiting",
            [personal_root, library_root],
            shadowed_index,
        )
        assert path == (
            library_root.path / "testing" / "condition-based-waiting" / "SKILL.md"
        ).absolute()

        record = resolver.resolve_skill(
            "superpowers:condition-based-waiting",
            [personal_root, library_root],
            shadowed_index,
        )
        assert record is not None
        assert len(record.description) == 480

    def test_precedence_follows_rank_not_list_order(
        self,
        shadowed_index: index.SkillIndex,
        personal_root: skill.SkillRoot,
        library_root: skill.SkillRoot,
    ) -> None:
        """Roots are searched by rank whatever order they are passed in."""
        record = resolver.resolve_skill(
            "condition-based-waiting", [library_root, personal_root], shadowed_index
        )
        assert record is not None
        assert record.root == personal_root

    def test_unshadowed_library_skill(
        self,
        shadowed_index: index.SkillIndex,
        personal_root: skill.SkillRoot,
        library_root: skill.SkillRoot,
    ) -> None:
        """A bare name falls through to the library."""
        record = resolver.resolve_skill(
            "brainstorming", [personal_root, library_root], shadowed_index
        )
        assert record is not None
        assert record.qualified_name == "superpowers:brainstorming"

    @_pytest.mark.parametrize(
        "name",
        ["missing-skill", "user:brainstorming", "superpowers:missing-skill"],
    )
    def test_absent_name_returns_none(
        self,
        shadowed_index: index.SkillIndex,
        personal_root: skill.SkillRoot,
        library_root: skill.SkillRoot,
        name: str,
    ) -> None:
        """Not finding a skill is not an error."""
        roots = [personal_root, library_root]
        assert resolver.resolve_skill(name, roots, shadowed_index) is None
        assert resolver.resolve_skill_path(name, roots, shadowed_index) is None

    def test_unknown_qualifier_raises(
        self,
        shadowed_index: index.SkillIndex,
        personal_root: skill.SkillRoot,
        library_root: skill.SkillRoot,
    ) -> None:
        """A qualifier matching no root is a configuration error."""
        with _pytest.raises(resolver.AmbiguousQualifierError) as exc_info:
            resolver.resolve_skill(
                "nowhere:brainstorming", [personal_root, library_root], shadowed_index
            )
        assert exc_info.value.qualifier == "nowhere"
        assert exc_info.value.known_aliases == ["user", "superpowers"]
        assert isinstance(exc_info.value, ValueError)

    def test_qualifier_limited_to_given_roots(
        self,
        shadowed_index: index.SkillIndex,
        personal_root: skill.SkillRoot,
    ) -> None:
        """Only roots passed to the call count as configured."""
        with _pytest.raises(resolver.AmbiguousQualifierError):
            resolver.resolve_skill("superpowers:brainstorming", [personal_root], shadowed_index)
        assert resolver.resolve_skill("brainstorming", [personal_root], shadowed_index) is None

    def test_lookup_does_not_walk_filesystem(
        self,
        shadowed_index: index.SkillIndex,
        personal_root: skill.SkillRoot,
        library_root: skill.SkillRoot,
        make_skill: MakeSkill,
    ) -> None:
        """Skills added after the index was built are not seen."""
        make_skill(personal_root.path, "added-later")
        roots = [personal_root, library_root]
        assert resolver.resolve_skill("added-later", roots, shadowed_index) is None


class TestSkillResolver:
    """Tests for the SkillResolver wrapper."""

    def test_defaults_to_indexed_roots(
        self, shadowed_index: index.SkillIndex, personal_root: skill.SkillRoot
    ) -> None:
        """Without explicit roots all indexed roots are used."""
        res = resolver.SkillResolver(shadowed_index)
        assert [r.alias for r in res.roots] == ["user", "superpowers"]
        record = res.resolve("condition-based-waiting")
        assert record is not None
        assert record.root == personal_root
        assert res.resolve_path("nothing-here") is None

    def test_suggest_puts_close_matches_first(
        self, shadowed_index: index.SkillIndex
    ) -> None:
        """Suggestions list close matches, then everything else."""
        res = resolver.SkillResolver(shadowed_index)
        suggestions = res.suggest("brainstorm")
        assert suggestions[0] == "brainstorming"
        assert sorted(suggestions) == ["brainstorming", "condition-based-waiting"]
