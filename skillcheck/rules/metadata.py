"""Front matter rules: presence, required fields, formats and types."""

import re
from collections import defaultdict
from collections.abc import Iterator
from datetime import date, datetime
from typing import Any

from skillcheck.constants import ENTRY_POINT_FIELDS, RECOGNIZED_FIELDS
from skillcheck.context import estimate_tokens, render_entry
from skillcheck.model import split_tool_list
from skillcheck.rules.base import Diagnostic, LintContext, Rule, Scope, Severity, SkillUnit

# MAJOR.MINOR.PATCH with optional semver pre-release and build suffixes
SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)

NAME_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_-]*$")

# Bash(git:*) style tool grants carry an argument pattern after the name
_TOOL_NAME = re.compile(r"^([A-Za-z][A-Za-z0-9_]*)(?:\(.*\))?$")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_iso8601(value: Any) -> datetime | date | None:
    """Parse an ISO-8601 date or timestamp, returning None if invalid.

    YAML already turns unquoted timestamps into datetime/date objects;
    those are accepted as-is.

    Examples:
        >>> parse_iso8601("2025-01-15T10:30:00Z")
        datetime.datetime(2025, 1, 15, 10, 30, tzinfo=datetime.timezone.utc)
        >>> parse_iso8601("last tuesday") is None
        True
    """
    if isinstance(value, (datetime, date)):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def check_frontmatter_valid(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    if unit.error is not None:
        yield rule.diagnostic(unit.marker_path, unit.error, unit.error_line)
    elif unit.frontmatter is None:
        yield rule.diagnostic(
            unit.marker_path, "SKILL.md has no YAML front matter (must start with ---)", 1
        )


def check_required_fields(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    if unit.frontmatter is None:
        return
    for key in ("name", "description"):
        value = unit.frontmatter.get(key)
        if key not in unit.frontmatter:
            yield rule.diagnostic(unit.marker_path, f"missing required field '{key}'", 1)
        elif not isinstance(value, str):
            yield rule.diagnostic(
                unit.marker_path,
                f"'{key}' must be a string, got {type(value).__name__}",
                unit.key_line(key),
            )
        elif not value.strip():
            yield rule.diagnostic(unit.marker_path, f"'{key}' must not be empty", unit.key_line(key))


def check_skill_version(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    if not unit.frontmatter or "skill_version" not in unit.frontmatter:
        return
    value = unit.frontmatter["skill_version"]
    if not isinstance(value, str) or not SEMVER_PATTERN.match(value):
        yield rule.diagnostic(
            unit.marker_path,
            f"skill_version '{value}' is not a MAJOR.MINOR.PATCH version"
            + ("" if isinstance(value, str) else " (quote it so YAML keeps it a string)"),
            unit.key_line("skill_version"),
        )


def check_updated_at(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    if not unit.frontmatter or "updated_at" not in unit.frontmatter:
        return
    value = unit.frontmatter["updated_at"]
    if parse_iso8601(value) is None:
        yield rule.diagnostic(
            unit.marker_path,
            f"updated_at '{value}' is not an ISO-8601 timestamp",
            unit.key_line("updated_at"),
        )


def _check_disclosure(rule: Rule, unit: SkillUnit, value: Any) -> Iterator[Diagnostic]:
    line = unit.key_line("progressive_disclosure")
    if not isinstance(value, dict):
        yield rule.diagnostic(unit.marker_path, "'progressive_disclosure' must be a mapping", line)
        return

    entry = value.get("entry_point")
    if entry is not None:
        if not isinstance(entry, dict):
            yield rule.diagnostic(
                unit.marker_path, "'progressive_disclosure.entry_point' must be a mapping", line
            )
        else:
            for key in ENTRY_POINT_FIELDS:
                if key in entry and not isinstance(entry[key], str):
                    yield rule.diagnostic(
                        unit.marker_path,
                        f"'progressive_disclosure.entry_point.{key}' must be a string",
                        line,
                    )

    references = value.get("references")
    if references is not None and (
        not isinstance(references, list) or not all(isinstance(r, str) for r in references)
    ):
        yield rule.diagnostic(
            unit.marker_path, "'progressive_disclosure.references' must be a list of paths", line
        )

    limit = value.get("context_limit")
    if limit is not None and (not _is_int(limit) or limit <= 0):
        yield rule.diagnostic(
            unit.marker_path,
            "'progressive_disclosure.context_limit' must be a positive integer",
            line,
        )


def check_field_types(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    data = unit.frontmatter
    if not data:
        return

    if "tags" in data:
        tags = data["tags"]
        if not isinstance(tags, list) or not all(isinstance(t, str) and t.strip() for t in tags):
            yield rule.diagnostic(
                unit.marker_path, "'tags' must be a list of non-empty strings", unit.key_line("tags")
            )

    if "context_limit" in data:
        limit = data["context_limit"]
        if not _is_int(limit) or limit <= 0:
            yield rule.diagnostic(
                unit.marker_path,
                f"'context_limit' must be a positive integer, got {limit!r}",
                unit.key_line("context_limit"),
            )

    for key in ("user-invocable", "disable-model-invocation"):
        if key in data and not isinstance(data[key], bool):
            yield rule.diagnostic(
                unit.marker_path, f"'{key}' must be true or false", unit.key_line(key)
            )

    if "argument-hint" in data and not isinstance(data["argument-hint"], str):
        yield rule.diagnostic(
            unit.marker_path, "'argument-hint' must be a string", unit.key_line("argument-hint")
        )

    if "progressive_disclosure" in data:
        yield from _check_disclosure(rule, unit, data["progressive_disclosure"])


def check_allowed_tools(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    if not unit.frontmatter or "allowed-tools" not in unit.frontmatter:
        return
    value = unit.frontmatter["allowed-tools"]
    line = unit.key_line("allowed-tools")

    if isinstance(value, str):
        entries = split_tool_list(value)
    elif isinstance(value, list) and all(isinstance(v, str) for v in value):
        entries = value
    else:
        yield rule.diagnostic(
            unit.marker_path, "'allowed-tools' must be a list or comma-separated string", line
        )
        return

    allowed = set(ctx.config.allowed_tools)
    for entry in entries:
        match = _TOOL_NAME.match(entry.strip())
        tool = match.group(1) if match else entry
        if tool not in allowed:
            yield rule.diagnostic(
                unit.marker_path,
                f"unknown tool '{tool}' in allowed-tools (known: {', '.join(ctx.config.allowed_tools)})",
                line,
            )


def check_name_format(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    if not unit.frontmatter:
        return
    name = unit.frontmatter.get("name")
    if isinstance(name, str) and name.strip() and not NAME_PATTERN.match(name):
        yield rule.diagnostic(
            unit.marker_path,
            f"name '{name}' should be alphanumeric with hyphens/underscores",
            unit.key_line("name"),
        )


def check_unknown_fields(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    if not unit.frontmatter:
        return
    for key in unit.frontmatter:
        if key not in RECOGNIZED_FIELDS:
            yield rule.diagnostic(
                unit.marker_path, f"unrecognized front matter field '{key}'", unit.key_line(str(key))
            )


def check_context_limit(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    if unit.skill is None or unit.skill.metadata.context_limit is None:
        return
    limit = unit.skill.metadata.context_limit
    if limit <= 0:
        return
    tokens = estimate_tokens(render_entry(unit.skill))
    if tokens > limit:
        yield rule.diagnostic(
            unit.marker_path,
            f"entry point alone is ~{tokens} tokens, over context_limit {limit}",
            unit.key_line("context_limit"),
        )


def check_unique_names(rule: Rule, ctx: LintContext) -> Iterator[Diagnostic]:
    by_name: dict[str, list[SkillUnit]] = defaultdict(list)
    for unit in ctx.units:
        if not unit.frontmatter:
            continue
        name = unit.frontmatter.get("name")
        if isinstance(name, str) and name.strip():
            by_name[name.strip()].append(unit)

    for name, units in sorted(by_name.items()):
        if len(units) < 2:
            continue
        for unit in units:
            others = [
                other.path.relative_to(ctx.root).as_posix()
                if other.path.is_relative_to(ctx.root)
                else other.path.as_posix()
                for other in units
                if other is not unit
            ]
            yield rule.diagnostic(
                unit.marker_path,
                f"skill name '{name}' is also declared by {', '.join(others)}",
                unit.key_line("name"),
            )


METADATA_RULES = (
    Rule("frontmatter-valid", "SKILL.md front matter is present and parses as a YAML mapping",
         Severity.ERROR, Scope.SKILL, check_frontmatter_valid),
    Rule("required-fields", "name and description are non-empty strings",
         Severity.ERROR, Scope.SKILL, check_required_fields),
    Rule("skill-version", "skill_version is MAJOR.MINOR.PATCH",
         Severity.ERROR, Scope.SKILL, check_skill_version),
    Rule("updated-at", "updated_at is an ISO-8601 timestamp",
         Severity.ERROR, Scope.SKILL, check_updated_at),
    Rule("field-types", "recognized fields have the expected types",
         Severity.ERROR, Scope.SKILL, check_field_types),
    Rule("allowed-tools", "allowed-tools only names known tools",
         Severity.ERROR, Scope.SKILL, check_allowed_tools),
    Rule("unique-names", "no two skills declare the same name",
         Severity.ERROR, Scope.CORPUS, check_unique_names),
    Rule("name-format", "name is alphanumeric with hyphens/underscores",
         Severity.WARNING, Scope.SKILL, check_name_format),
    Rule("unknown-fields", "front matter only uses recognized fields",
         Severity.WARNING, Scope.SKILL, check_unknown_fields),
    Rule("context-limit", "the entry point fits within context_limit",
         Severity.WARNING, Scope.SKILL, check_context_limit),
)
