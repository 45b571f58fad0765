"""
Skill preprocessing for user messages.

Handles explicit ``/skill <name>`` commands. The name may be qualified with
a root alias (``/skill superpowers:brainstorming``) to bypass a personal
override.

When the skill resolves, the rendered body is returned for injection into
the conversation and the command is removed from the message. When it
does not, the original message is kept and the error lists suggestions.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import re as _re
import typing as _typing

import skillbook.skills.registry as skill_registry
import skillbook.skills.resolver as resolver

_logger = _logging.getLogger(__name__)

# Matches: /skill name, /skill alias:name, /skill name rest of message
_SKILL_COMMAND_RE = _re.compile(
    r"^/skill\s+((?:[a-z0-9-]*:)?[a-z0-9_-]+)(?:\s+(.*))?$",
    _re.IGNORECASE | _re.DOTALL,
)


@_dataclasses.dataclass
class SkillPreprocessResult:
    """Result of preprocessing a user message for skills."""

    user_message: str
    """The user message (the rest after /skill name if a skill triggered)."""

    skill_injection: str | None = None
    """Skill content to inject, or None if no skill triggered."""

    skill_name: str | None = None
    """Requested skill name, or None if no /skill command was present."""

    trigger_type: _typing.Literal["explicit"] | None = None
    """How the skill was triggered."""

    error: str | None = None
    """Error message if skill lookup failed."""


def preprocess_for_skills(
    user_message: str,
    registry: skill_registry.SkillRegistry | None,
) -> SkillPreprocessResult:
    """
    Preprocess a user message for skill triggers.

    Args:
        user_message: The raw user message.
        registry: Registry for skill lookup. If None, returns unchanged.

    Returns:
        SkillPreprocessResult with potential skill injection.
    """
    if registry is None:
        return SkillPreprocessResult(user_message=user_message)

    match = _SKILL_COMMAND_RE.match(user_message.strip())
    if not match:
        return SkillPreprocessResult(user_message=user_message)

    skill_name = match.group(1).lower()
    rest_of_message = match.group(2) or ""

    _logger.debug("Explicit skill command: /skill %s", skill_name)

    try:
        content = registry.trigger_skill(skill_name)
    except resolver.AmbiguousQualifierError as e:
        return SkillPreprocessResult(
            user_message=user_message,
            skill_name=skill_name,
            trigger_type="explicit",
            error=str(e),
        )

    if content is None:
        suggestions = registry.suggest(skill_name)
        available = ", ".join(suggestions) if suggestions else "(none)"
        return SkillPreprocessResult(
            user_message=user_message,
            skill_name=skill_name,
            trigger_type="explicit",
            error=f"Skill '{skill_name}' not found. Available: {available}",
        )

    return SkillPreprocessResult(
        user_message=rest_of_message.strip(),
        skill_injection=content,
        skill_name=skill_name,
        trigger_type="explicit",
    )


def format_skill_injection_message(content: str, skill_name: str) -> str:
    """
    Format skill content for injection as a system message.

    Args:
        content: The skill body content.
        skill_name: Name of the skill.

    Returns:
        Formatted message for conversation injection.
    """
    return (
        f"[Skill '{skill_name}' activated - follow these instructions:]\n\n"
        f"{content}"
    )
