"""Configuration type definitions for skillbook settings.

These are the config sections nested within the main Settings class:
- RootConfig: one skill search location
- LibraryConfig: the bundled skill library
- DiscoveryConfig: how roots are searched
- BootstrapConfig: skill injected at session start
- UpdatesConfig: git update check for the library

All types use `extra="allow"` so unknown fields are preserved. The CLI
reports them (via `Settings.collect_all_extra_fields()`) as a warning at
startup instead of dropping them silently.
"""

import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic

import skillbook.constants as constants
import skillbook.library as library


class ConfigBase(_pydantic.BaseModel):
    """Base class for all config types."""

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Return fields that were provided but not in the schema.

        Unknown fields usually indicate typos or outdated config keys.
        """
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(self, prefix: str = "") -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this config and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.
        ``{"discovery.max_dept": 2, "roots.0.ranks": 1}``.
        """
        result: dict[str, _typing.Any] = {}

        for key, value in self.get_extra_fields().items():
            result[f"{prefix}.{key}" if prefix else key] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            child_prefix = f"{prefix}.{field_name}" if prefix else field_name
            result.update(collect_extra_fields(value, child_prefix))

        return result


def collect_extra_fields(value: _typing.Any, prefix: str) -> dict[str, _typing.Any]:
    """Collect extra fields from a config object or a list of them."""
    if isinstance(value, ConfigBase):
        return value.collect_all_extra_fields(prefix)
    result: dict[str, _typing.Any] = {}
    if isinstance(value, list):
        for i, item in enumerate(value):
            result.update(collect_extra_fields(item, f"{prefix}.{i}"))
    return result


class RootConfig(ConfigBase):
    """A skill root as written in configuration."""

    alias: str = _pydantic.Field(
        ...,
        pattern=constants.SKILL_NAME_PATTERN,
        description="Alias used in qualified names (alias:skill)",
    )

    path: _pathlib.Path = _pydantic.Field(
        ...,
        description="Directory to search; ~ is expanded",
    )

    rank: int = _pydantic.Field(
        default=0,
        description="Precedence rank (lower wins)",
    )

    @_pydantic.field_validator("path")
    @classmethod
    def _expand_user(cls, value: _pathlib.Path) -> _pathlib.Path:
        return value.expanduser()


class LibraryConfig(ConfigBase):
    """The bundled skill library root."""

    enabled: bool = _pydantic.Field(
        default=True,
        description="Include the library in the search roots",
    )

    alias: str = _pydantic.Field(
        default=constants.DEFAULT_LIBRARY_ALIAS,
        pattern=constants.SKILL_NAME_PATTERN,
        description="Alias of the library root",
    )

    rank: int = _pydantic.Field(
        default=constants.DEFAULT_LIBRARY_RANK,
        description="Precedence rank of the library (lower wins)",
    )

    path: _pathlib.Path | None = _pydantic.Field(
        default=None,
        description="Library directory; None uses the bundled library",
    )

    @_pydantic.field_validator("path")
    @classmethod
    def _expand_user(cls, value: _pathlib.Path | None) -> _pathlib.Path | None:
        return value.expanduser() if value is not None else None

    def get_path(self) -> _pathlib.Path:
        """Configured library path, or the bundled one."""
        return self.path if self.path is not None else library.get_library_path()


class DiscoveryConfig(ConfigBase):
    """Discovery options."""

    max_depth: int = _pydantic.Field(
        default=constants.DEFAULT_MAX_DEPTH,
        ge=0,
        description="Deepest directory level searched below each root",
    )

    marker_file: str = _pydantic.Field(
        default=constants.SKILL_MARKER_FILENAME,
        min_length=1,
        description="File whose presence marks a skill directory",
    )


class BootstrapConfig(ConfigBase):
    """Skill injected at session start."""

    enabled: bool = _pydantic.Field(
        default=True,
        description="Inject the bootstrap skill at session start",
    )

    skill: str = _pydantic.Field(
        default=constants.DEFAULT_BOOTSTRAP_SKILL,
        min_length=1,
        description="Bare or qualified name of the bootstrap skill",
    )


class UpdatesConfig(ConfigBase):
    """Update check for a git-managed library."""

    enabled: bool = _pydantic.Field(
        default=False,
        description="Check the library checkout for upstream updates at session start",
    )

    timeout_seconds: float = _pydantic.Field(
        default=constants.DEFAULT_UPDATE_CHECK_TIMEOUT,
        gt=0,
        description="Seconds allowed for each git command",
    )
