"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with SKILLBOOK_ prefix
3. .env file (if present)
4. Layered YAML config files:
   - Project config: .skillbook/config.yaml (highest)
   - User config: ~/.config/skillbook/config.yaml
   - Built-in defaults: bundled defaults/config.yaml (lowest)

Nested config uses double underscore delimiter:
  SKILLBOOK_DISCOVERY__MAX_DEPTH=2
  SKILLBOOK_LIBRARY__ENABLED=false
"""

import os as _os
import pathlib as _pathlib
import subprocess as _subprocess
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import skillbook.config.sources as sources
import skillbook.config.types as types
import skillbook.skills.skill as skill_module


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    SKILLBOOK_ENV_FILE selects one explicitly. Without it, no .env file is
    loaded and configuration comes from the environment and YAML layers.
    """
    if env_file := _os.environ.get("SKILLBOOK_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


def find_git_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path | None:
    """Find the git repository root from the given path or current directory."""
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    try:
        result = _subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            cwd=start_path,
            timeout=5,
        )
        if result.returncode == 0:
            return _pathlib.Path(result.stdout.strip())
    except (_subprocess.TimeoutExpired, FileNotFoundError, OSError):
        pass
    return None


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Find the project root directory.

    Tries (in order):
    1. Git repository root
    2. Nearest ancestor containing a .skillbook directory
    3. Current working directory
    """
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    git_root = find_git_root(start_path)
    if git_root:
        return git_root

    current = start_path.resolve()
    while current != current.parent:
        if (current / ".skillbook").is_dir():
            return current
        current = current.parent

    return _pathlib.Path.cwd()


class Settings(_pydantic_settings.BaseSettings):
    """
    skillbook configuration settings.

    All settings can be overridden via environment variables with SKILLBOOK_ prefix.
    For nested config, use double underscore: SKILLBOOK_DISCOVERY__MAX_DEPTH=2

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (SKILLBOOK_*)
    3. .env file
    4. Project config (.skillbook/config.yaml)
    5. User config (~/.config/skillbook/config.yaml)
    6. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="SKILLBOOK_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args) (highest)
        2. env_settings (SKILLBOOK_* env vars)
        3. dotenv_settings (.env file)
        4. yaml_settings (layered config.yaml files)
        5. (defaults via Field definitions) (lowest)
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.LayeredYamlSettingsSource(settings_cls, find_project_root()),
            file_secret_settings,
        )

    roots: list[types.RootConfig] = _pydantic.Field(
        default_factory=list,
        description="Skill roots (personal and additional locations)",
    )

    library: types.LibraryConfig = _pydantic.Field(
        default_factory=types.LibraryConfig,
        description="Bundled skill library",
    )

    discovery: types.DiscoveryConfig = _pydantic.Field(
        default_factory=types.DiscoveryConfig,
        description="Discovery options",
    )

    bootstrap: types.BootstrapConfig = _pydantic.Field(
        default_factory=types.BootstrapConfig,
        description="Session-start bootstrap skill",
    )

    updates: types.UpdatesConfig = _pydantic.Field(
        default_factory=types.UpdatesConfig,
        description="Library update check",
    )

    verbose: bool = _pydantic.Field(
        default=False,
        description="Enable debug logging",
    )

    @_pydantic.model_validator(mode="after")
    def _check_unique_aliases(self) -> "Settings":
        aliases = [root.alias for root in self.roots]
        if self.library.enabled:
            aliases.append(self.library.alias)
        duplicates = sorted({a for a in aliases if aliases.count(a) > 1})
        if duplicates:
            raise ValueError(f"Duplicate skill root aliases: {', '.join(duplicates)}")
        return self

    def get_skill_roots(self) -> list[skill_module.SkillRoot]:
        """
        Build the search roots.

        Returns:
            Roots in precedence order (lowest rank first).
        """
        roots = [
            skill_module.SkillRoot(alias=r.alias, path=r.path, rank=r.rank)
            for r in self.roots
        ]
        if self.library.enabled:
            roots.append(
                skill_module.SkillRoot(
                    alias=self.library.alias,
                    path=self.library.get_path(),
                    rank=self.library.rank,
                )
            )
        return skill_module.order_roots(roots)

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return top-level fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Collect unknown keys from all configuration sections.

        Returns:
            Flat dict keyed by dotted path, e.g. ``{"discovery.max_dept": 2}``.
            Empty when every key is recognized.
        """
        result = self.get_extra_fields()
        for name in ("roots", "library", "discovery", "bootstrap", "updates"):
            result.update(types.collect_extra_fields(getattr(self, name), name))
        return result

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert settings to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")
