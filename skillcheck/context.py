"""Progressive disclosure: render a skill for injection into a model context.

A host loads a skill in levels. The entry level is cheap (identity plus the
entry point summary), the full level is the SKILL.md body, and reference
documents are pulled in one at a time only when the model asks for them.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from skillcheck.constants import CHARS_PER_TOKEN
from skillcheck.exceptions import ReferenceNotFoundError
from skillcheck.model import ReferenceDocument, Skill

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "[... truncated to fit context limit ...]"


class DisclosureLevel(Enum):
    """How much of a skill to render."""

    ENTRY = "entry"
    FULL = "full"
    REFERENCE = "reference"


@dataclass
class RenderedContext:
    """Text ready for injection, with its budget accounting."""

    text: str
    truncated: bool = False
    limit: int | None = None

    @property
    def estimated_tokens(self) -> int:
        return estimate_tokens(self.text)


def estimate_tokens(text: str) -> int:
    """Estimate the token count of text.

    Examples:
        >>> estimate_tokens("")
        0
        >>> estimate_tokens("abcde")
        2
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def render_entry(skill: Skill) -> str:
    """Render the entry level: name, description and entry point."""
    metadata = skill.metadata
    lines = [f"# {skill.name}", ""]
    if metadata.description:
        lines += [metadata.description.strip(), ""]

    entry = metadata.entry_point
    if entry.summary:
        lines += ["## Summary", entry.summary.strip(), ""]
    if entry.when_to_use:
        lines += ["## When to use", entry.when_to_use.strip(), ""]
    if entry.quick_start:
        lines += ["## Quick start", entry.quick_start.strip(), ""]

    return "\n".join(lines).rstrip() + "\n"


def _reference_names(skill: Skill) -> list[str]:
    return [p.relative_to(skill.path).as_posix() for p in skill.reference_paths() if p.is_file()]


def resolve_reference(skill: Skill, reference: str) -> Path:
    """Resolve a reference name to a file inside the skill directory.

    A bare file name (``anti-patterns.md``) matches a reference of that name
    anywhere in the skill's reference list.

    Raises:
        ReferenceNotFoundError: If no such reference exists, or the name
            escapes the skill directory
    """
    skill_root = skill.path.resolve()
    candidate = (skill.path / reference).resolve()
    if not candidate.is_relative_to(skill_root):
        raise ReferenceNotFoundError(
            f"Reference '{reference}' is outside skill '{skill.name}'"
        )
    if candidate.is_file():
        return candidate

    for path in skill.reference_paths():
        if path.name == reference and path.is_file():
            return path

    available = ", ".join(_reference_names(skill)) or "none"
    raise ReferenceNotFoundError(
        f"Reference '{reference}' not found for skill '{skill.name}' (available: {available})"
    )


def _truncate(text: str, limit: int, skill: Skill) -> str:
    """Cut text at a line boundary so that text plus marker fits in limit.

    The reference list is dropped from the marker when it doesn't fit. If
    even the bare marker is over the limit, only the marker is returned.
    """
    capacity = limit * CHARS_PER_TOKEN
    marker = TRUNCATION_MARKER + "\n"
    references = _reference_names(skill)
    if references:
        with_references = f"{TRUNCATION_MARKER}\n[See: {', '.join(references)}]\n"
        if len(with_references) <= capacity:
            marker = with_references
    budget = capacity - len(marker)

    kept: list[str] = []
    used = 0
    for line in text.splitlines(keepends=True):
        if not line.endswith("\n"):
            line += "\n"
        if used + len(line) > budget:
            break
        kept.append(line)
        used += len(line)

    return "".join(kept) + marker


def render_context(
    skill: Skill,
    level: DisclosureLevel = DisclosureLevel.ENTRY,
    reference: str | None = None,
    limit: int | None = None,
    default_limit: int | None = None,
) -> RenderedContext:
    """Render a skill at a disclosure level within a token budget.

    The budget is ``limit`` if given, else the skill's ``context_limit``,
    else ``default_limit``; None means unlimited.

    Args:
        skill: The skill to render
        level: ENTRY, FULL or REFERENCE
        reference: Reference name, required for the REFERENCE level
        limit: Explicit token budget
        default_limit: Corpus-wide fallback budget

    Returns:
        RenderedContext with the text and whether it was truncated

    Raises:
        ReferenceNotFoundError: If the reference can't be resolved
        ValueError: If REFERENCE is requested without a reference name
    """
    if level is DisclosureLevel.REFERENCE:
        if not reference:
            raise ValueError("reference level requires a reference name")
        text = ReferenceDocument.load(resolve_reference(skill, reference)).text
    elif level is DisclosureLevel.FULL:
        text = skill.body.lstrip("\n")
    else:
        text = render_entry(skill)

    budget = limit if limit is not None else skill.metadata.context_limit
    if budget is None:
        budget = default_limit

    if budget is not None and estimate_tokens(text) > budget:
        logger.debug("Truncating %s (%s) to %d tokens", skill.name, level.value, budget)
        return RenderedContext(text=_truncate(text, budget, skill), truncated=True, limit=budget)

    return RenderedContext(text=text, truncated=False, limit=budget)
