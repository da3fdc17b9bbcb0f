"""Document rules: reference paths, prose links and code fence pairing."""

from collections.abc import Iterator
from pathlib import Path

from skillcheck.constants import REFERENCES_SUBDIR
from skillcheck.rules.base import Diagnostic, LintContext, Rule, Scope, Severity, SkillUnit
from skillcheck.rules.markdown import extract_links, scan_fences


def _declared_references(unit: SkillUnit) -> list[str]:
    if not unit.frontmatter:
        return []
    disclosure = unit.frontmatter.get("progressive_disclosure")
    if not isinstance(disclosure, dict):
        return []
    references = disclosure.get("references")
    if not isinstance(references, list):
        return []
    return [ref for ref in references if isinstance(ref, str)]


def _reference_files(unit: SkillUnit) -> list[Path]:
    """Existing reference documents inside the skill, sorted."""
    if unit.skill is not None:
        return [p for p in unit.skill.reference_paths() if p.is_file()]
    references_dir = unit.path / REFERENCES_SUBDIR
    if not references_dir.is_dir():
        return []
    return sorted(references_dir.rglob("*.md"))


def _documents(unit: SkillUnit) -> Iterator[tuple[Path, str, int]]:
    """Yield (path, text, line offset) for every markdown document of a skill.

    The SKILL.md body is yielded with the offset of its first line, so
    findings point at real file lines. It is still scanned when only the
    YAML failed to parse.
    """
    yield unit.marker_path, unit.body, unit.body_start_line - 1
    for path in _reference_files(unit):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        yield path, text, 0


def _inside(path: Path, root: Path) -> bool:
    return path.resolve().is_relative_to(root.resolve())


def check_references_exist(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    line = unit.key_line("progressive_disclosure")
    for ref in _declared_references(unit):
        candidate = unit.path / ref
        if not _inside(candidate, unit.path):
            yield rule.diagnostic(
                unit.marker_path, f"reference '{ref}' points outside the skill directory", line
            )
        elif not candidate.is_file():
            yield rule.diagnostic(unit.marker_path, f"reference '{ref}' does not exist", line)


def _resolves(target: str, document: Path, unit: SkillUnit, ctx: LintContext, prose: bool) -> bool:
    if target.startswith("/"):
        return (ctx.root / target.lstrip("/")).exists()

    bases = [document.parent, unit.path, ctx.root]
    if prose and "/" not in target:
        # "See anti-patterns.md" usually means the skill's references/ copy
        bases.append(unit.path / REFERENCES_SUBDIR)
    return any((base / target).exists() for base in bases)


def check_links_resolve(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    for path, text, offset in _documents(unit):
        for link in extract_links(text):
            if not _resolves(link.target, path, unit, ctx, link.prose):
                kind = "mention" if link.prose else "link"
                yield rule.diagnostic(
                    path, f"{kind} to '{link.target}' does not resolve to a file", link.line + offset
                )


def check_code_fences(rule: Rule, unit: SkillUnit, ctx: LintContext) -> Iterator[Diagnostic]:
    for path, text, offset in _documents(unit):
        for fence in scan_fences(text):
            if fence.end is None:
                yield rule.diagnostic(
                    path, f"code fence {fence.marker} opened here is never closed", fence.start + offset
                )


DOCUMENT_RULES = (
    Rule("references-exist", "progressive_disclosure.references resolve to files in the skill",
         Severity.ERROR, Scope.SKILL, check_references_exist),
    Rule("links-resolve", "prose mentions and markdown links resolve to existing files",
         Severity.ERROR, Scope.SKILL, check_links_resolve),
    Rule("code-fences", "every opening code fence has a matching close",
         Severity.ERROR, Scope.SKILL, check_code_fences),
)
