"""
Main CLI entry point for skillbook.

Provides the command-line interface using Click. The agent host calls
`skillbook session-start --json` from its session hook and
`skillbook invoke <name>` when a skill is requested.
"""

import json as _json
import logging as _logging
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic
import yaml as _yaml

import skillbook
import skillbook.config as config
import skillbook.config.sources as config_sources
import skillbook.constants as constants
import skillbook.session as session
import skillbook.skills as skills

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

EXIT_NOT_FOUND = 1
EXIT_CONFIG_ERROR = 2

_logger = _logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    """Send log records to stderr; DEBUG when verbose, WARNING otherwise."""
    _logging.basicConfig(
        level=_logging.DEBUG if verbose else _logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=_sys.stderr,
    )


def _get_registry(ctx: _click.Context) -> skills.SkillRegistry:
    settings: config.Settings = ctx.obj["settings"]
    return skills.SkillRegistry.from_settings(settings)


def _resolve_or_exit(
    registry: skills.SkillRegistry,
    name: str,
    json_output: bool,
) -> skills.SkillRecord:
    """Resolve a name, printing suggestions and exiting when it fails."""
    try:
        record = registry.get_skill(name)
    except skills.AmbiguousQualifierError as e:
        if json_output:
            _click.echo(_json.dumps({"error": str(e)}))
        else:
            _click.echo(f"Error: {e}", err=True)
        raise SystemExit(EXIT_CONFIG_ERROR) from None

    if record is None:
        suggestions = registry.suggest(name)
        if json_output:
            _click.echo(_json.dumps({
                "error": f"Skill not found: {name}",
                "suggestions": suggestions,
            }))
        else:
            _click.echo(f"Error: Skill '{name}' not found", err=True)
            if suggestions:
                _click.echo(f"Available skills: {', '.join(suggestions)}", err=True)
        raise SystemExit(EXIT_NOT_FOUND)

    return record


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(skillbook.__version__, "-v", "--version", prog_name="skillbook")
@_click.option(
    "--verbose",
    is_flag=True,
    help="Enable debug logging",
)
@_click.pass_context
def cli(ctx: _click.Context, verbose: bool) -> None:
    """
    skillbook - skill library loader for AI agents.

    \b
    Examples:
        skillbook skill list                       # List discovered skills
        skillbook skill resolve brainstorming      # Show which file wins
        skillbook invoke superpowers:brainstorming # Print a library skill
        skillbook prompt "/skill brainstorming"    # Expand a /skill command
        skillbook session-start --json             # Session hook output
    """
    try:
        settings = config.Settings()
    except (config.ConfigFileError, _pydantic.ValidationError) as e:
        _click.echo(f"Configuration error: {e}", err=True)
        raise SystemExit(EXIT_CONFIG_ERROR) from None

    if verbose:
        settings.verbose = True
    _configure_logging(settings.verbose)

    extras = settings.collect_all_extra_fields()
    if extras:
        _logger.warning("Unknown configuration keys: %s", ", ".join(sorted(extras)))

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# =============================================================================
# Skill Commands
# =============================================================================


@cli.group(name="skill")
def skill_group() -> None:
    """Skill discovery and resolution commands."""
    pass


@skill_group.command(name="list")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def skill_list(ctx: _click.Context, json_output: bool) -> None:
    """List all discovered skills."""
    registry = _get_registry(ctx)

    if json_output:
        _click.echo(_json.dumps(registry.to_dict(), indent=2))
        return

    index = registry.index
    _click.echo("Skill Roots:")
    for root in index.roots:
        exists = "✓" if root.path.is_dir() else "(not found)"
        _click.echo(f"  [{root.rank}] {root.alias}: {root.path} {exists}")
    _click.echo()

    for error in index.errors:
        _click.echo(f"Error: {error}", err=True)

    skill_list = registry.list_skills()
    if not skill_list:
        _click.echo("No skills found.")
        return

    _click.echo(f"Discovered Skills ({len(skill_list)}):")
    _click.echo(f"{'Name':<36} {'Root'}")
    _click.echo("-" * 70)
    for record in skill_list:
        _click.echo(f"{record.name:<36} {record.root.alias}")

    shadowed = index.shadowed_records()
    if shadowed:
        _click.echo()
        _click.echo(f"Shadowed ({len(shadowed)}):")
        for record in shadowed:
            _click.echo(f"  {record.qualified_name}")


@skill_group.command(name="show")
@_click.argument("name")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.option("--body", is_flag=True, help="Show full skill body")
@_click.pass_context
def skill_show(ctx: _click.Context, name: str, json_output: bool, body: bool) -> None:
    """Show details for a specific skill."""
    registry = _get_registry(ctx)
    record = _resolve_or_exit(registry, name, json_output)
    files = skills.list_supporting_files(record)

    if json_output:
        data = record.to_dict()
        data["supporting_files"] = files
        if body:
            data["body"] = skills.load_body(record)
        _click.echo(_json.dumps(data, indent=2))
        return

    _click.echo(f"Skill: {record.name}")
    _click.echo(f"  Description: {record.description or '(none)'}")
    _click.echo(f"  Path: {record.path}")
    _click.echo(f"  Root: {record.root.alias}")
    if files:
        _click.echo()
        _click.echo("Supporting files:")
        for f in files:
            _click.echo(f"  - {f}")
    if body:
        _click.echo()
        _click.echo("--- Body ---")
        _click.echo(skills.load_body(record))


@skill_group.command(name="resolve")
@_click.argument("name")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def skill_resolve(ctx: _click.Context, name: str, json_output: bool) -> None:
    """Print the marker file NAME resolves to.

    NAME is a bare skill name or ROOT:NAME.
    """
    registry = _get_registry(ctx)
    record = _resolve_or_exit(registry, name, json_output)

    if json_output:
        _click.echo(_json.dumps(record.to_dict(), indent=2))
    else:
        _click.echo(str(record.path))


@skill_group.command(name="validate")
@_click.argument("path", type=_click.Path(path_type=_pathlib.Path))
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def skill_validate(ctx: _click.Context, path: _pathlib.Path, json_output: bool) -> None:
    """Validate a skill directory."""
    settings: config.Settings = ctx.obj["settings"]
    marker = path / settings.discovery.marker_file

    result: dict[str, _typing.Any] = {
        "path": str(path),
        "valid": False,
        "warnings": [],
        "error": None,
    }

    if not marker.is_file():
        result["error"] = f"{settings.discovery.marker_file} not found: {marker}"
    else:
        root = skills.SkillRoot(alias="local", path=path.parent.absolute())
        try:
            record = skills.load_skill_record(marker, root)
            body = skills.load_body(record)
        except (OSError, ValueError) as e:
            result["error"] = str(e)
        else:
            result["valid"] = True
            result["name"] = record.name
            result["description"] = record.description
            result["body_lines"] = len(body.splitlines())
            if not record.description:
                result["warnings"].append("Missing description")
            elif not record.description.startswith("Use when"):
                result["warnings"].append("Description should start with 'Use when'")
            if result["body_lines"] > constants.SKILL_BODY_SOFT_LIMIT:
                result["warnings"].append(
                    f"Body exceeds recommended limit "
                    f"({result['body_lines']} > {constants.SKILL_BODY_SOFT_LIMIT} lines)"
                )

    if json_output:
        _click.echo(_json.dumps(result, indent=2))
    else:
        _click.echo(f"Skill: {path}")
        if result["error"]:
            _click.echo("  Status: ✗ invalid")
            _click.echo(f"  Error: {result['error']}")
        elif result["warnings"]:
            _click.echo("  Status: ⚠ valid with warnings")
            for warning in result["warnings"]:
                _click.echo(f"  Warning: {warning}")
        else:
            _click.echo("  Status: ✓ valid")
        if result.get("name"):
            _click.echo(f"  Name: {result['name']}")
            _click.echo(f"  Body lines: {result['body_lines']}")

    if not result["valid"]:
        raise SystemExit(1)


# =============================================================================
# Agent Host Commands
# =============================================================================


@cli.command(name="invoke")
@_click.argument("name")
@_click.pass_context
def invoke(ctx: _click.Context, name: str) -> None:
    """Print the body of skill NAME for the agent's context."""
    registry = _get_registry(ctx)
    record = _resolve_or_exit(registry, name, json_output=False)
    _click.echo(skills.load_body(record))


@cli.command(name="prompt")
@_click.argument("message")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def prompt(ctx: _click.Context, message: str, json_output: bool) -> None:
    """Expand a ``/skill NAME [rest]`` command in a user MESSAGE.

    Messages without the command are printed unchanged.
    """
    registry = _get_registry(ctx)
    result = skills.preprocess_for_skills(message, registry)

    injection = None
    if result.skill_injection is not None and result.skill_name is not None:
        injection = skills.format_skill_injection_message(
            result.skill_injection, result.skill_name
        )

    if json_output:
        _click.echo(_json.dumps({
            "user_message": result.user_message,
            "skill_name": result.skill_name,
            "injection": injection,
            "error": result.error,
        }, indent=2))
    elif result.error:
        _click.echo(f"Error: {result.error}", err=True)
    else:
        if injection is not None:
            _click.echo(injection)
            if result.user_message:
                _click.echo()
        if result.user_message:
            _click.echo(result.user_message)

    if result.error:
        raise SystemExit(EXIT_NOT_FOUND)


@cli.command(name="session-start")
@_click.option("--json", "json_output", is_flag=True, help="Emit session hook JSON")
@_click.pass_context
def session_start(ctx: _click.Context, json_output: bool) -> None:
    """Print the bootstrap skill for injection at session start."""
    settings: config.Settings = ctx.obj["settings"]
    registry = skills.SkillRegistry.from_settings(settings)

    if not settings.bootstrap.enabled:
        result = session.SessionStartResult(content=None, skill_name=settings.bootstrap.skill)
    else:
        update_repo = settings.library.get_path() if settings.updates.enabled else None
        injector = session.SessionStartInjector(
            registry,
            settings.bootstrap.skill,
            update_repo=update_repo,
            update_timeout=settings.updates.timeout_seconds,
        )
        result = injector.build()

    if json_output:
        _click.echo(_json.dumps(result.to_hook_payload(), indent=2))
        return

    for warning in result.warnings:
        _click.echo(f"Warning: {warning}", err=True)
    if result.content:
        _click.echo(result.content)


# =============================================================================
# Config Commands
# =============================================================================


@cli.group(name="config")
def config_cmd() -> None:
    """Configuration commands."""
    pass


def _print_yaml(yaml_text: str) -> None:
    """Print YAML, highlighted when stdout is a terminal."""
    if _sys.stdout.isatty():
        import rich.console as _rich_console
        import rich.syntax as _rich_syntax

        console = _rich_console.Console()
        console.print(_rich_syntax.Syntax(yaml_text, "yaml", background_color="default"))
    else:
        _click.echo(yaml_text, nl=False)


@config_cmd.command(name="show")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def config_show(ctx: _click.Context, json_output: bool) -> None:
    """Show the effective configuration."""
    settings: config.Settings = ctx.obj["settings"]
    data = settings.to_dict()

    if json_output:
        _click.echo(_json.dumps(data, indent=2))
    else:
        _print_yaml(_yaml.safe_dump(data, sort_keys=False))


@config_cmd.command(name="path")
def config_path() -> None:
    """Show config file locations."""
    project_root = config.find_project_root()
    layers = [
        ("built-in", config_sources.get_builtin_defaults_path()),
        ("user", config_sources.get_user_config_path()),
        ("project", config_sources.get_project_config_path(project_root)),
    ]
    for name, path in layers:
        exists = "✓" if path.exists() else "(not found)"
        _click.echo(f"{name:<9} {path} {exists}")


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="skillbook")


if __name__ == "__main__":
    main()
