"""Skill metadata and document types.

These types mirror the front matter contract of a skill corpus:

- SkillMetadata: every recognized SKILL.md front matter field
- ProgressiveDisclosure / EntryPoint: the optional layered-loading hints
- Skill: a loaded skill directory (metadata plus markdown body)
- ReferenceDocument: a plain markdown file under a skill's references/
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

from skillcheck.constants import (
    ENTRY_POINT_FIELDS,
    RECOGNIZED_FIELDS,
    REFERENCES_SUBDIR,
    SKILL_MARKER,
)


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return None
    return str(value)


# Commas or whitespace, except inside a tool's parenthesized pattern (Bash(git:*))
_TOOL_SEPARATOR = re.compile(r"[,\s]+(?![^(]*\))")


def split_tool_list(value: Any) -> list[str]:
    """Split an allowed-tools value (list, or comma/space separated string)."""
    if isinstance(value, str):
        return [part for part in _TOOL_SEPARATOR.split(value.strip()) if part]
    return _as_str_list(value)


def _as_str_list(value: Any) -> list[str]:
    """Coerce a YAML list or comma-separated string to a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return []


@dataclass(frozen=True)
class EntryPoint:
    """The short-form summary a host shows before loading a full skill."""

    summary: str | None = None
    when_to_use: str | None = None
    quick_start: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "EntryPoint":
        if not isinstance(data, dict):
            return cls()
        return cls(**{key: _as_str(data.get(key)) for key in ENTRY_POINT_FIELDS})

    @property
    def is_empty(self) -> bool:
        return not (self.summary or self.when_to_use or self.quick_start)


@dataclass(frozen=True)
class ProgressiveDisclosure:
    """Layered-loading hints from the ``progressive_disclosure`` field."""

    entry_point: EntryPoint = field(default_factory=EntryPoint)
    references: tuple[str, ...] = ()
    context_limit: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "ProgressiveDisclosure":
        if not isinstance(data, dict):
            return cls()
        limit = data.get("context_limit")
        return cls(
            entry_point=EntryPoint.from_dict(data.get("entry_point")),
            references=tuple(_as_str_list(data.get("references"))),
            context_limit=limit if _is_int(limit) else None,
        )


def _is_int(value: Any) -> bool:
    # bool is an int subclass; YAML `true` is not a limit
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class SkillMetadata:
    """Front matter of a SKILL.md, coerced into typed fields.

    Construction via from_frontmatter() never raises: values of the wrong
    type are dropped (left None or empty) and reported by the lint rules,
    which inspect the raw mapping instead.
    """

    name: str | None = None
    description: str | None = None
    skill_version: str | None = None
    updated_at: str | None = None
    tags: list[str] = field(default_factory=list)
    progressive_disclosure: ProgressiveDisclosure | None = None
    context_limit: int | None = None
    user_invocable: bool | None = None
    disable_model_invocation: bool | None = None
    allowed_tools: list[str] = field(default_factory=list)
    argument_hint: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_frontmatter(cls, data: dict[str, Any] | None) -> "SkillMetadata":
        """Build metadata from a parsed front matter mapping."""
        if not data:
            return cls()

        disclosure = None
        if "progressive_disclosure" in data:
            disclosure = ProgressiveDisclosure.from_dict(data["progressive_disclosure"])

        limit = data.get("context_limit")
        if not _is_int(limit):
            limit = disclosure.context_limit if disclosure else None

        invocable = data.get("user-invocable")
        disable = data.get("disable-model-invocation")

        return cls(
            name=_as_str(data.get("name")),
            description=_as_str(data.get("description")),
            skill_version=_as_str(data.get("skill_version")),
            updated_at=_as_str(data.get("updated_at")),
            tags=_as_str_list(data.get("tags")),
            progressive_disclosure=disclosure,
            context_limit=limit,
            user_invocable=invocable if isinstance(invocable, bool) else None,
            disable_model_invocation=disable if isinstance(disable, bool) else None,
            allowed_tools=split_tool_list(data.get("allowed-tools")),
            argument_hint=_as_str(data.get("argument-hint")),
            extra={k: v for k, v in data.items() if k not in RECOGNIZED_FIELDS},
        )

    @property
    def entry_point(self) -> EntryPoint:
        if self.progressive_disclosure is None:
            return EntryPoint()
        return self.progressive_disclosure.entry_point

    @property
    def references(self) -> tuple[str, ...]:
        if self.progressive_disclosure is None:
            return ()
        return self.progressive_disclosure.references


@dataclass
class Skill:
    """A loaded skill: a directory containing SKILL.md."""

    metadata: SkillMetadata
    path: Path  # the skill directory
    body: str = ""
    body_start_line: int = 1
    raw_frontmatter: dict[str, Any] | None = None

    @property
    def name(self) -> str:
        """Declared name, falling back to the directory name."""
        return self.metadata.name or self.path.name

    @property
    def directory(self) -> Path:
        return self.path

    @property
    def marker_path(self) -> Path:
        return self.path / SKILL_MARKER

    @property
    def references_dir(self) -> Path:
        return self.path / REFERENCES_SUBDIR

    def reference_paths(self) -> list[Path]:
        """Paths of all reference documents available to this skill.

        Declared references come first, in declaration order, followed by any
        other markdown files under references/ not already declared.
        """
        paths: list[Path] = []
        seen: set[Path] = set()
        for ref in self.metadata.references:
            candidate = self.path / ref
            if candidate not in seen:
                seen.add(candidate)
                paths.append(candidate)
        if self.references_dir.is_dir():
            for candidate in sorted(self.references_dir.rglob("*.md")):
                if candidate not in seen:
                    seen.add(candidate)
                    paths.append(candidate)
        return paths


@dataclass
class ReferenceDocument:
    """A reference markdown document. It carries no front matter."""

    path: Path
    text: str

    @classmethod
    def load(cls, path: Path) -> "ReferenceDocument":
        return cls(path=path, text=path.read_text(encoding="utf-8"))
