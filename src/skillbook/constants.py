"""
Shared constants for skillbook.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Skill layout
SKILL_MARKER_FILENAME = "SKILL.md"
"""Canonical marker file whose presence identifies a skill directory."""

FRONTMATTER_DELIMITER = "---"
"""Line that opens and closes the frontmatter block."""

SKILL_NAME_PATTERN = r"^[a-z0-9-]+$"
"""Allowed skill names and root aliases (lowercase, digits, hyphens)."""

SKILL_NAME_MAX_LENGTH = 64
"""Maximum length of a skill name."""

SKILL_DESCRIPTION_MAX_LENGTH = 1024
"""Maximum length of a skill description."""

SKILL_BODY_SOFT_LIMIT = 500
"""Body length (lines) above which a warning is logged when loading."""

QUALIFIER_SEPARATOR = ":"
"""Separates a root alias from a skill name (``superpowers:my-skill``)."""

# Discovery defaults
DEFAULT_MAX_DEPTH = 3
"""How many directory levels below a root are searched for skills."""

# Roots
DEFAULT_LIBRARY_ALIAS = "superpowers"
"""Alias of the bundled skill library."""

DEFAULT_LIBRARY_RANK = 100
"""Rank of the bundled library (lower rank wins)."""

# Session start
DEFAULT_BOOTSTRAP_SKILL = "using-skillbook"
"""Skill injected into the agent context at session start."""

# Update checks
DEFAULT_UPDATE_CHECK_TIMEOUT = 3.0
"""Seconds allowed for each git command of the update check."""
