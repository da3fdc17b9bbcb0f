"""Main CLI entry point for skillcheck."""

from typing import Annotated

import typer

from skillcheck import __version__
from skillcheck.cli import author, browse, vendor
from skillcheck.cli.check import check
from skillcheck.cli.common import configure_logging

app = typer.Typer(
    name="skillcheck",
    help="Lint, browse and maintain a corpus of SKILL.md agent skills.",
    no_args_is_help=True,
    add_completion=False,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"skillcheck {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """skillcheck - keep agent skill documents loadable and consistent."""
    configure_logging(verbose)


app.command("check")(check)
app.command("list")(browse.list_skills)
app.command("show")(browse.show)
app.command("context")(browse.context)
app.command("select")(browse.select)
app.command("new")(author.new)
app.command("bump")(author.bump)
app.command("init")(author.init)
app.add_typer(vendor.app, name="vendor")


if __name__ == "__main__":
    app()
