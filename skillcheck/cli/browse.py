"""Commands for browsing a corpus the way a host agent sees it."""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from skillcheck.cli.common import (
    cli_errors,
    console,
    get_config,
    get_library,
    get_skill,
    relative,
)
from skillcheck.context import DisclosureLevel, render_context
from skillcheck.library import SkillLibrary


def list_skills(
    path: Annotated[
        Path | None,
        typer.Argument(help="Corpus directory (default: corpus root)", show_default=False),
    ] = None,
    tag: Annotated[
        str | None,
        typer.Option("--tag", "-t", help="Only list skills with this tag"),
    ] = None,
) -> None:
    """List the skills in the corpus.

    Examples:
      skillcheck list
      skillcheck list --tag security
      skillcheck list vendor/
    """
    config = get_config(path.resolve() if path else None)
    root = path.resolve() if path else config.root
    library = SkillLibrary.from_root(root, config)
    skills = library.by_tag(tag) if tag else library.skills

    if not skills and not library.failures:
        suffix = f" tagged '{tag}'" if tag else ""
        console.print(f"[dim]No skills{suffix} found under {root}[/dim]")
        return

    if skills:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Name", style="cyan")
        table.add_column("Version")
        table.add_column("Updated")
        table.add_column("Tags", style="dim")
        table.add_column("Path", style="dim")
        for skill in sorted(skills, key=lambda s: s.name):
            table.add_row(
                skill.name,
                skill.metadata.skill_version or "-",
                skill.metadata.updated_at or "-",
                ", ".join(skill.metadata.tags),
                relative(skill.path, root),
            )
        console.print(table)

    if library.failures:
        console.print()
        console.print(f"[red]{len(library.failures)} skill(s) failed to load:[/red]")
        for failure in library.failures:
            console.print(f"  {relative(failure.path, root)}: {escape(failure.error)}", highlight=False, soft_wrap=True)


def show(
    name: Annotated[str, typer.Argument(help="Skill name", metavar="NAME")],
) -> None:
    """Show a skill's metadata, entry point and references.

    Examples:
      skillcheck show code-audit
    """
    config = get_config()
    skill = get_skill(name, config)
    metadata = skill.metadata

    console.print(f"[bold cyan]{skill.name}[/bold cyan]")
    if metadata.description:
        console.print(f"[dim]{metadata.description.strip()}[/dim]")
    console.print()

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Path", relative(skill.path, config.root))
    table.add_row("Version", metadata.skill_version or "-")
    table.add_row("Updated", metadata.updated_at or "-")
    if metadata.tags:
        table.add_row("Tags", ", ".join(metadata.tags))
    if metadata.context_limit is not None:
        table.add_row("Context limit", str(metadata.context_limit))
    if metadata.allowed_tools:
        table.add_row("Allowed tools", ", ".join(metadata.allowed_tools))
    if metadata.argument_hint:
        table.add_row("Argument hint", metadata.argument_hint)
    if metadata.user_invocable is not None:
        table.add_row("User-invocable", str(metadata.user_invocable).lower())
    if metadata.disable_model_invocation is not None:
        table.add_row("Model invocation", "disabled" if metadata.disable_model_invocation else "enabled")
    console.print(table)

    entry = metadata.entry_point
    if not entry.is_empty:
        console.print()
        console.print("[bold]Entry point:[/bold]")
        for label, value in (
            ("Summary", entry.summary),
            ("When to use", entry.when_to_use),
            ("Quick start", entry.quick_start),
        ):
            if value:
                console.print(f"  [bold]{label}:[/bold] {value.strip()}")

    references = skill.reference_paths()
    if references:
        console.print()
        console.print("[bold]References:[/bold]")
        for path in references:
            status = "" if path.is_file() else " [red](missing)[/red]"
            console.print(f"  - {relative(path, skill.path)}{status}")


def context(
    name: Annotated[str, typer.Argument(help="Skill name", metavar="NAME")],
    full: Annotated[
        bool,
        typer.Option("--full", help="Render the whole SKILL.md body"),
    ] = False,
    reference: Annotated[
        str | None,
        typer.Option("--reference", "-r", help="Render one reference document"),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", help="Token budget (overrides context_limit)", min=1),
    ] = None,
) -> None:
    """Print a skill as a host would inject it into a model context.

    By default only the entry point is rendered. Use --full for the body or
    --reference to load a single reference document.

    Examples:
      skillcheck context code-audit
      skillcheck context code-audit --full --limit 500
      skillcheck context code-audit --reference anti-patterns.md
    """
    if full and reference:
        typer.echo("Error: --full and --reference are mutually exclusive", err=True)
        raise typer.Exit(1)

    config = get_config()
    skill = get_skill(name, config)

    if reference:
        level = DisclosureLevel.REFERENCE
    elif full:
        level = DisclosureLevel.FULL
    else:
        level = DisclosureLevel.ENTRY

    with cli_errors():
        rendered = render_context(
            skill,
            level=level,
            reference=reference,
            limit=limit,
            default_limit=config.default_context_limit,
        )

    typer.echo(rendered.text, nl=False)
    if rendered.truncated:
        typer.echo(
            f"Truncated to ~{rendered.limit} tokens; use --reference to load more",
            err=True,
        )


def select(
    query: Annotated[str, typer.Argument(help="What you are trying to do")],
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Maximum number of skills to show", min=1),
    ] = 5,
) -> None:
    """Rank skills by how well their descriptions match a query.

    Examples:
      skillcheck select "review this diff for security issues"
    """
    config = get_config()
    matches = get_library(config).select(query, limit=limit)

    if not matches:
        console.print("[dim]No matching skills[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Matched", style="dim")
    table.add_column("Description")
    for match in matches:
        table.add_row(
            str(match.score),
            match.skill.name,
            ", ".join(match.matched),
            (match.skill.metadata.description or "").strip(),
        )
    console.print(table)
