"""
Configuration module for skillbook.

Uses pydantic-settings for environment variable loading and layered YAML
files for user and project configuration.
"""

from skillbook.config.settings import (
    Settings,
    find_git_root,
    find_project_root,
)
from skillbook.config.sources import ConfigFileError

__all__ = ["ConfigFileError", "Settings", "find_git_root", "find_project_root"]
