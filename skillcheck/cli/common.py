"""Shared CLI utilities for skillcheck commands."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import typer
from rich.console import Console
from rich.logging import RichHandler

from skillcheck.config import SkillcheckConfig, load_config
from skillcheck.exceptions import SkillcheckError
from skillcheck.library import SkillLibrary
from skillcheck.model import Skill

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, markup=False)],
        force=True,
    )


@contextmanager
def cli_errors() -> Generator[None, None, None]:
    """Turn library errors into an error message and exit code 1."""
    try:
        yield
    except SkillcheckError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def get_config(start_path: Path | None = None) -> SkillcheckConfig:
    """Load the nearest skillcheck.toml (or defaults), exiting on errors."""
    with cli_errors():
        return load_config(start_path)


def get_library(config: SkillcheckConfig) -> SkillLibrary:
    return SkillLibrary.from_root(config.root, config)


def get_skill(name: str, config: SkillcheckConfig | None = None) -> Skill:
    """Look up a skill by name in the current corpus, exiting if absent."""
    config = config or get_config()
    library = get_library(config)
    with cli_errors():
        return library.get(name)


def relative(path: Path, root: Path) -> str:
    """Display a path relative to root when it's inside it."""
    try:
        return path.relative_to(root).as_posix() or "."
    except ValueError:
        return path.as_posix()
