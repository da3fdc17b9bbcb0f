"""Lint orchestration: build skill units, run rules, collect a report."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from skillcheck.config import SkillcheckConfig
from skillcheck.constants import SKILL_MARKER
from skillcheck.discovery import discover_skills
from skillcheck.exceptions import ConfigValidationError, FrontmatterError, SkillNotFoundError
from skillcheck.frontmatter import load_yaml_mapping, split_frontmatter
from skillcheck.model import Skill, SkillMetadata
from skillcheck.rules.base import Diagnostic, LintContext, Rule, Scope, Severity, SkillUnit
from skillcheck.rules.registry import get_all_rules

logger = logging.getLogger(__name__)


@dataclass
class LintReport:
    """Overall lint result for a corpus."""

    root: Path
    diagnostics: list[Diagnostic] = field(default_factory=list)
    skills_checked: int = 0
    rules_run: list[str] = field(default_factory=list)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    @property
    def is_clean(self) -> bool:
        return not self.diagnostics

    def exit_code(self, strict: bool = False) -> int:
        """Process exit code: 1 on errors (or on warnings when strict)."""
        if self.errors:
            return 1
        if strict and self.warnings:
            return 1
        return 0

    def to_dict(self) -> dict:
        return {
            "root": self.root.as_posix(),
            "skills_checked": self.skills_checked,
            "rules": self.rules_run,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "diagnostics": [d.to_dict(self.root) for d in self.diagnostics],
        }


def build_unit(skill_dir: Path) -> SkillUnit:
    """Read and parse one skill directory into a SkillUnit.

    Parse failures are captured on the unit rather than raised, so the
    frontmatter-valid rule can report them like any other finding.
    """
    unit = SkillUnit(path=skill_dir)
    marker = skill_dir / SKILL_MARKER
    try:
        unit.text = marker.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        unit.error = f"cannot read {SKILL_MARKER}: {e}"
        return unit

    try:
        raw, unit.body, unit.body_start_line = split_frontmatter(unit.text)
    except FrontmatterError as e:
        unit.error = str(e)
        unit.error_line = e.line
        return unit

    unit.raw_frontmatter = raw or ""
    try:
        unit.frontmatter = load_yaml_mapping(raw) if raw is not None else None
    except FrontmatterError as e:
        # The body is still checked by the document rules
        unit.error = str(e)
        unit.error_line = e.line
        return unit

    unit.skill = Skill(
        metadata=SkillMetadata.from_frontmatter(unit.frontmatter),
        path=skill_dir,
        body=unit.body,
        body_start_line=unit.body_start_line,
        raw_frontmatter=unit.frontmatter,
    )
    return unit

    unit.frontmatter = document.frontmatter
    unit.raw_frontmatter = document.raw_frontmatter
    unit.body = document.body
    unit.body_start_line = document.body_start_line
    unit.skill = Skill(
        metadata=SkillMetadata.from_frontmatter(document.frontmatter),
        path=skill_dir,
        body=document.body,
        body_start_line=document.body_start_line,
        raw_frontmatter=document.frontmatter,
    )
    return unit


def select_rules(
    config: SkillcheckConfig,
    only: list[str] | None = None,
) -> list[Rule]:
    """Pick the rules to run from the registry.

    Args:
        config: Corpus config supplying [lint] select/ignore
        only: Rule ids requested on the command line; overrides select

    Returns:
        Rules in registration order

    Raises:
        ConfigValidationError: If a rule id is not registered
    """
    rules = get_all_rules()
    requested = list(only) if only else list(config.lint.select)

    for rule_id in requested + list(config.lint.ignore) + list(config.lint.severity):
        if rule_id not in rules:
            raise ConfigValidationError(
                f"Unknown rule '{rule_id}'. Known rules: {', '.join(rules)}"
            )

    selected = [rule for rule_id, rule in rules.items() if not requested or rule_id in requested]
    return [rule for rule in selected if rule.id not in config.lint.ignore]


def _apply_severity(diagnostic: Diagnostic, config: SkillcheckConfig) -> Diagnostic:
    override = config.lint.severity.get(diagnostic.rule_id)
    if override is None:
        return diagnostic
    return diagnostic.with_severity(Severity(override))


def _run(rules: list[Rule], ctx: LintContext, include_corpus: bool) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for unit in ctx.units:
        for rule in rules:
            if rule.scope is Scope.SKILL:
                diagnostics.extend(rule.check(rule, unit, ctx))
    if include_corpus:
        for rule in rules:
            if rule.scope is Scope.CORPUS:
                diagnostics.extend(rule.check(rule, ctx))

    diagnostics = [_apply_severity(d, ctx.config) for d in diagnostics]
    diagnostics.sort(key=lambda d: (d.path.as_posix(), d.line or 0, d.rule_id))
    return diagnostics


def lint_corpus(
    root: Path,
    config: SkillcheckConfig,
    only: list[str] | None = None,
    under: Path | None = None,
) -> LintReport:
    """Lint every skill under a corpus root.

    Args:
        root: Corpus root directory; links starting with / resolve here
        config: Corpus configuration
        only: Optional rule ids to restrict the run to
        under: Only lint skills inside this directory of the corpus

    Returns:
        LintReport with all findings, sorted by path and line
    """
    rules = select_rules(config, only)
    if under is not None and not under.resolve().is_relative_to(root.resolve()):
        root = under
    skill_dirs = discover_skills(root, config.lint.exclude, start=under)
    ctx = LintContext(root=root, config=config, units=[build_unit(d) for d in skill_dirs])
    logger.debug("Linting %d skill(s) with %d rule(s)", len(ctx.units), len(rules))

    return LintReport(
        root=root,
        diagnostics=_run(rules, ctx, include_corpus=True),
        skills_checked=len(ctx.units),
        rules_run=[rule.id for rule in rules],
    )


def lint_skill(
    skill_dir: Path,
    config: SkillcheckConfig,
    only: list[str] | None = None,
) -> LintReport:
    """Lint one skill in isolation. Corpus-scoped rules are skipped.

    Raises:
        SkillNotFoundError: If skill_dir has no SKILL.md
    """
    skill_dir = skill_dir.resolve()
    if not (skill_dir / SKILL_MARKER).is_file():
        raise SkillNotFoundError(f"{SKILL_MARKER} not found in {skill_dir}")

    rules = select_rules(config, only)
    root = config.root if skill_dir.is_relative_to(config.root.resolve()) else skill_dir
    ctx = LintContext(root=root, config=config, units=[build_unit(skill_dir)])

    return LintReport(
        root=root,
        diagnostics=_run(rules, ctx, include_corpus=False),
        skills_checked=1,
        rules_run=[rule.id for rule in rules if rule.scope is Scope.SKILL],
    )
