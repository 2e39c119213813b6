#!/usr/bin/env python3
"""preload-skills CLI - Inspect how a project's skills will be injected.

Usage:
    preload-skills check
    preload-skills resolve src/api/users.ts
    preload-skills render --project-dir path/to/project
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import click

from . import __version__
from .core.paths import find_config_file
from .hooks.plugin import create_context
from .skills.triggers import expand_groups, extension_match, path_match

project_dir_option = click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project root used for config and skill discovery.",
)


@click.group()
@click.version_option(version=__version__, prog_name="preload-skills")
def main():
    """preload-skills - Inject skill documents into agent sessions."""
    pass


@main.command()
@project_dir_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def check(project_dir: Path, as_json: bool):
    """Report which initial skills load and which are missing."""
    ctx = create_context(project_dir)
    config_path = find_config_file(project_dir)

    if as_json:
        report: Dict[str, Any] = {
            "config": str(config_path) if config_path else None,
            "injection_method": ctx.config.injection_method.value,
            "loaded": [skill.to_dict() for skill in ctx.initial_skills],
            "missing": ctx.missing_skills,
            "budget": ctx.allocator.budget_stats(ctx.initial_tokens_used).to_dict(),
        }
        click.echo(json.dumps(report, indent=2))
    else:
        click.echo(f"Config: {config_path or '(none, using defaults)'}")
        click.echo(f"Injection method: {ctx.config.injection_method.value}")
        click.echo()

        if ctx.initial_skills:
            click.echo(click.style("Initial skills:", bold=True))
            for skill in ctx.initial_skills:
                click.echo(f"  {skill.name} ({skill.token_count} tokens)")
                click.echo(f"    {skill.file_path}")
        else:
            click.echo("No initial skills loaded.")

        if ctx.missing_skills:
            click.echo()
            click.echo(click.style("Missing skills:", fg="red", bold=True))
            for name in ctx.missing_skills:
                click.echo(f"  {name}")

        click.echo()
        click.echo(ctx.allocator.budget_stats(ctx.initial_tokens_used).format_summary())

    if ctx.missing_skills:
        sys.exit(1)


@main.command()
@click.argument("file_path")
@project_dir_option
def resolve(file_path: str, project_dir: Path):
    """Show the skills triggered when an agent touches FILE_PATH."""
    ctx = create_context(project_dir)
    config = ctx.config

    ext = os.path.splitext(file_path)[1]
    by_extension = extension_match(ext, config.file_type_skills) if ext else []
    by_path = path_match(file_path, config.path_patterns)

    if not by_extension and not by_path:
        click.echo(f"No skills triggered by {file_path}")
        return

    def _show(label: str, names: List[str]) -> None:
        if not names:
            return
        click.echo(click.style(label, bold=True))
        for name in expand_groups(names, config.groups):
            skill = ctx.skill_store.load(name)
            if skill is None:
                click.echo(f"  {name} " + click.style("(missing)", fg="red"))
            else:
                click.echo(f"  {name} ({skill.token_count} tokens)")

    _show(f"Extension {ext}:", by_extension)
    _show("Path patterns:", by_path)


@main.command()
@project_dir_option
def render(project_dir: Path):
    """Print the block injected at the start of a session."""
    ctx = create_context(project_dir)
    if not ctx.initial_formatted_content:
        raise click.ClickException("No initial skills to render")
    click.echo(ctx.initial_formatted_content)


if __name__ == "__main__":
    main()
