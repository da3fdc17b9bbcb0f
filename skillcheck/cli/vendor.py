"""Vendor commands for skillcheck - copy skills in from GitHub."""

from typing import Annotated

import typer

from skillcheck.cli.common import cli_errors, console, get_config, relative
from skillcheck.fetcher import update_vendored, vendor_skill

app = typer.Typer(
    help="Copy skills from GitHub repositories into the corpus.",
    no_args_is_help=True,
)


@app.command("add")
def add(
    source: Annotated[
        str,
        typer.Argument(
            help="Source: owner/repo or owner/repo/path/to/skill",
            metavar="SOURCE",
        ),
    ],
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Local name (default: skill directory name)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace an existing local copy"),
    ] = False,
) -> None:
    """Vendor a skill and record its source in skillcheck.toml.

    Examples:
      skillcheck vendor add honojs/skills/skills/hono
      skillcheck vendor add acme/audit-skill --name audit
    """
    config = get_config()
    with console.status(f"[dim]Fetching {source}...[/dim]"), cli_errors():
        result = vendor_skill(source, config, name=name, overwrite=force)

    verb = "Replaced" if result.replaced else "Vendored"
    console.print(
        f"[green]{verb} {result.name} at {relative(result.path, config.root)}[/green]"
    )
    console.print("[dim]Run 'skillcheck check' to lint it[/dim]")


@app.command("update")
def update(
    name: Annotated[
        str,
        typer.Argument(help="Name of a vendored skill", metavar="NAME"),
    ],
) -> None:
    """Re-fetch a vendored skill from its recorded source.

    Examples:
      skillcheck vendor update hono
    """
    config = get_config()
    with console.status(f"[dim]Updating {name}...[/dim]"), cli_errors():
        result = update_vendored(name, config)

    console.print(f"[green]Updated {result.name} from {result.source}[/green]")
