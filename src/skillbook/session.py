"""
Session-start injection of the bootstrap skill.

At process start the agent host asks for one designated skill, whose body
is injected verbatim into the agent's context. A missing bootstrap skill
is reported but does not stop the session.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import skillbook.constants as constants
import skillbook.skills.loader as loader
import skillbook.skills.registry as skill_registry
import skillbook.skills.resolver as resolver
import skillbook.updates as updates

_logger = _logging.getLogger(__name__)

HOOK_EVENT_NAME = "SessionStart"


@_dataclasses.dataclass
class SessionStartResult:
    """Context produced at session start."""

    content: str | None
    """Context to inject, or None if the bootstrap skill was unavailable."""

    skill_name: str
    """Requested bootstrap skill."""

    path: _pathlib.Path | None = None
    """Marker file the content came from."""

    warnings: list[str] = _dataclasses.field(default_factory=list)
    """Problems to show the user."""

    def to_hook_payload(self) -> dict[str, _typing.Any]:
        """Hook output understood by the agent host."""
        parts: list[str] = []
        if self.content:
            parts.append(self.content)
        parts.extend(f"<skillbook-warning>{w}</skillbook-warning>" for w in self.warnings)
        return {
            "hookSpecificOutput": {
                "hookEventName": HOOK_EVENT_NAME,
                "additionalContext": "\n\n".join(parts),
            }
        }


class SessionStartInjector:
    """Builds the session-start context from the bootstrap skill."""

    def __init__(
        self,
        registry: skill_registry.SkillRegistry,
        bootstrap_skill: str = constants.DEFAULT_BOOTSTRAP_SKILL,
        *,
        update_repo: _pathlib.Path | None = None,
        update_timeout: float = constants.DEFAULT_UPDATE_CHECK_TIMEOUT,
    ) -> None:
        """
        Initialize the injector.

        Args:
            registry: Registry to resolve the bootstrap skill in.
            bootstrap_skill: Bare or qualified name of the skill to inject.
            update_repo: Library checkout to check for updates. None skips
                the check.
            update_timeout: Seconds allowed for each git command.
        """
        self._registry = registry
        self._bootstrap_skill = bootstrap_skill
        self._update_repo = update_repo
        self._update_timeout = update_timeout

    def build(self) -> SessionStartResult:
        """Resolve and load the bootstrap skill."""
        result = SessionStartResult(content=None, skill_name=self._bootstrap_skill)

        for error in self._registry.index.errors:
            result.warnings.append(str(error))

        try:
            record = self._registry.get_skill(self._bootstrap_skill)
        except resolver.AmbiguousQualifierError as e:
            _logger.warning("Bootstrap skill not loaded: %s", e)
            result.warnings.append(str(e))
            record = None
        else:
            if record is None:
                message = f"Bootstrap skill '{self._bootstrap_skill}' not found"
                _logger.warning("%s", message)
                result.warnings.append(message)

        if record is not None:
            try:
                result.content = loader.render_injection(record)
                result.path = record.path
            except OSError as e:
                _logger.warning("Cannot read bootstrap skill %s: %s", record.path, e)
                result.warnings.append(f"Cannot read {record.path}: {e}")

        if self._update_repo is not None and updates.check_for_updates(
            self._update_repo, self._update_timeout
        ):
            result.warnings.append(
                f"Skill library at {self._update_repo} is behind upstream; "
                "pull to update."
            )

        return result
