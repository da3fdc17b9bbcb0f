"""Authoring commands for skillcheck - scaffold, version and initialize."""

from pathlib import Path
from typing import Annotated

import typer

from skillcheck.authoring import VersionPart, bump_skill, create_skill
from skillcheck.cli.common import cli_errors, console, get_config, get_skill, relative
from skillcheck.config import LintSettings, SkillcheckConfig
from skillcheck.constants import CONFIG_FILENAME

DEFAULT_SKILLS_DIR = "skills"


def new(
    name: Annotated[
        str,
        typer.Argument(help="Name for the new skill", metavar="NAME"),
    ],
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="One-line description"),
    ] = "",
    tags: Annotated[
        list[str] | None,
        typer.Option("--tag", "-t", help="Tag for the skill (repeatable)"),
    ] = None,
    directory: Annotated[
        Path | None,
        typer.Option(
            "--dir",
            help="Parent directory (default: skills/ under the corpus root if present)",
            show_default=False,
        ),
    ] = None,
) -> None:
    """Create a new skill with complete front matter.

    The scaffold starts at version 0.1.0 and passes `skillcheck check`.

    Examples:
      skillcheck new code-audit
      skillcheck new code-audit -d "Audit code for quality issues" -t review
    """
    config = get_config()
    if directory is None:
        skills_dir = config.root / DEFAULT_SKILLS_DIR
        directory = skills_dir if skills_dir.is_dir() else config.root

    with cli_errors():
        skill_dir = create_skill(directory.resolve(), name, description, tags)

    console.print(f"[green]Created skill at {relative(skill_dir, config.root)}[/green]")
    console.print("[dim]Edit SKILL.md, then run 'skillcheck check'[/dim]")


def bump(
    name: Annotated[str, typer.Argument(help="Skill name", metavar="NAME")],
    part: Annotated[
        VersionPart,
        typer.Option("--part", "-p", help="Version part to increment"),
    ] = VersionPart.PATCH,
) -> None:
    """Increment a skill's version and stamp updated_at.

    Examples:
      skillcheck bump code-audit
      skillcheck bump code-audit --part minor
    """
    config = get_config()
    skill = get_skill(name, config)
    previous = skill.metadata.skill_version

    with cli_errors():
        version = bump_skill(skill.path, part)

    if previous:
        console.print(f"[green]Bumped {skill.name}: {previous} -> {version}[/green]")
    else:
        console.print(f"[green]Set {skill.name} to version {version}[/green]")


def init() -> None:
    """Create a skillcheck.toml in the current directory.

    The directory holding skillcheck.toml is the corpus root: links with a
    leading slash resolve against it and skill names must be unique in it.
    """
    config_path = Path.cwd() / CONFIG_FILENAME
    if config_path.exists():
        console.print(f"[yellow]{CONFIG_FILENAME} already exists[/yellow]")
        return

    config = SkillcheckConfig(
        path=config_path,
        lint=LintSettings(exclude=["node_modules/**"]),
    )
    with cli_errors():
        config.save()
    console.print(f"[green]Created {CONFIG_FILENAME}[/green]")
