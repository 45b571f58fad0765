"""
skillbook - skill library loader for AI agents.

Discovers markdown skill documents in configured roots, resolves them by
name with personal-over-library shadowing, and serves their bodies for
injection into an agent's context.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("skillbook")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "skillbook Contributors"

from skillbook.config import Settings  # noqa: E402
from skillbook.skills import SkillRegistry  # noqa: E402

__all__ = ["__version__", "__version_info__", "Settings", "SkillRegistry"]
