"""Rule and diagnostic types for corpus linting."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

from skillcheck.config import SkillcheckConfig
from skillcheck.constants import SKILL_MARKER
from skillcheck.model import Skill


class Severity(Enum):
    """How serious a finding is."""

    ERROR = "error"
    WARNING = "warning"


class Scope(Enum):
    """What a rule looks at."""

    SKILL = "skill"  # one skill at a time
    CORPUS = "corpus"  # all skills together


@dataclass(frozen=True)
class Diagnostic:
    """A single lint finding."""

    rule_id: str
    severity: Severity
    path: Path
    message: str
    line: int | None = None

    def with_severity(self, severity: Severity) -> "Diagnostic":
        return replace(self, severity=severity)

    def location(self, root: Path | None = None) -> str:
        """Format as ``path:line`` relative to root when possible."""
        path = self.path
        if root is not None:
            try:
                path = self.path.relative_to(root)
            except ValueError:
                pass
        if self.line is not None:
            return f"{path.as_posix()}:{self.line}"
        return path.as_posix()

    def to_dict(self, root: Path | None = None) -> dict[str, Any]:
        path = self.path
        if root is not None:
            try:
                path = self.path.relative_to(root)
            except ValueError:
                pass
        return {
            "rule": self.rule_id,
            "severity": self.severity.value,
            "path": path.as_posix(),
            "line": self.line,
            "message": self.message,
        }


@dataclass
class SkillUnit:
    """Everything the rules need to know about one skill directory.

    Attributes:
        path: The skill directory
        text: Raw SKILL.md text ("" if unreadable)
        frontmatter: Parsed mapping, None if absent or broken
        raw_frontmatter: YAML text between the delimiters
        error: Why the front matter couldn't be parsed, if it couldn't
        error_line: File line of that error, when known
        skill: The loaded Skill when the front matter parsed
    """

    path: Path
    text: str = ""
    frontmatter: dict[str, Any] | None = None
    raw_frontmatter: str = ""
    body: str = ""
    body_start_line: int = 1
    error: str | None = None
    error_line: int | None = None
    skill: Skill | None = None

    @property
    def marker_path(self) -> Path:
        return self.path / SKILL_MARKER

    def key_line(self, key: str) -> int | None:
        """File line number of a top-level front matter key."""
        prefix = f"{key}:"
        for index, line in enumerate(self.raw_frontmatter.splitlines()):
            if line.startswith(prefix):
                # Line 1 is the opening delimiter
                return index + 2
        return None


@dataclass
class LintContext:
    """Corpus-wide inputs shared by all rules."""

    root: Path
    config: SkillcheckConfig
    units: list[SkillUnit] = field(default_factory=list)


@dataclass(frozen=True)
class Rule:
    """A named lint check.

    Skill-scoped rules are called once per skill with (rule, unit, context);
    corpus-scoped rules are called once with (rule, context).
    """

    id: str
    description: str
    severity: Severity
    scope: Scope
    check: Callable[..., Iterable[Diagnostic]]

    def diagnostic(self, path: Path, message: str, line: int | None = None) -> Diagnostic:
        """Build a diagnostic at this rule's default severity."""
        return Diagnostic(
            rule_id=self.id,
            severity=self.severity,
            path=path,
            message=message,
            line=line,
        )
