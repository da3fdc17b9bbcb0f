"""Check command for skillcheck - lint a skill corpus."""

import json
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from skillcheck.cli.common import cli_errors, console, get_config
from skillcheck.constants import SKILL_MARKER
from skillcheck.linter import LintReport, lint_corpus, lint_skill
from skillcheck.rules.base import Severity


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


def _print_text(report: LintReport) -> None:
    for diagnostic in report.diagnostics:
        color = "red" if diagnostic.severity is Severity.ERROR else "yellow"
        console.print(
            f"{diagnostic.location(report.root)}: "
            f"[{color}]{diagnostic.severity.value}[/{color}] "
            f"[dim]\\[{diagnostic.rule_id}][/dim] {escape(diagnostic.message)}",
            highlight=False,
            soft_wrap=True,
        )

    if report.diagnostics:
        console.print()

    checked = f"{report.skills_checked} skill(s) checked"
    if report.is_clean:
        console.print(f"[green]{checked}, no problems found[/green]")
        return
    console.print(
        f"{checked}: [red]{len(report.errors)} error(s)[/red], "
        f"[yellow]{len(report.warnings)} warning(s)[/yellow]"
    )


def check(
    path: Annotated[
        Path | None,
        typer.Argument(
            help="Corpus directory, skill directory or SKILL.md (default: corpus root)",
            show_default=False,
        ),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail on warnings as well as errors"),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.TEXT,
    rules: Annotated[
        list[str] | None,
        typer.Option("--rule", "-r", help="Only run this rule (repeatable)"),
    ] = None,
) -> None:
    """Lint skills: front matter, versions, timestamps, links and code fences.

    Exits 1 if any errors are found (or warnings, with --strict).

    Examples:
      skillcheck check
      skillcheck check skills/code-audit
      skillcheck check --rule links-resolve --format json
    """
    target = path.resolve() if path else None
    if target is not None and not target.exists():
        typer.echo(f"Error: Path not found: {path}", err=True)
        raise typer.Exit(1)

    start = target if target is None or target.is_dir() else target.parent
    config = get_config(start)

    with cli_errors():
        if target is not None and target.is_file() and target.name == SKILL_MARKER:
            report = lint_skill(target.parent, config, rules)
        else:
            report = lint_corpus(config.root, config, rules, under=target)

    if output_format is OutputFormat.JSON:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _print_text(report)

    code = report.exit_code(strict or config.lint.strict)
    if code:
        raise typer.Exit(code)
