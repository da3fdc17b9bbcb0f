"""Authoring operations: scaffold new skills and stamp new versions."""

import logging
import re
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from skillcheck.constants import REFERENCES_SUBDIR, SKILL_MARKER
from skillcheck.exceptions import SkillcheckError, SkillExistsError
from skillcheck.frontmatter import read_document, update_frontmatter
from skillcheck.rules.metadata import NAME_PATTERN, SEMVER_PATTERN

logger = logging.getLogger(__name__)

INITIAL_VERSION = "0.1.0"


class VersionPart(str, Enum):
    """Which part of MAJOR.MINOR.PATCH to increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC timestamp, to the second."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def bump_version(version: str, part: VersionPart) -> str:
    """Increment a semantic version, resetting the lower parts.

    Pre-release and build suffixes are dropped.

    Examples:
        >>> bump_version("1.2.3", VersionPart.PATCH)
        '1.2.4'
        >>> bump_version("1.2.3", VersionPart.MINOR)
        '1.3.0'
        >>> bump_version("1.2.3-rc.1", VersionPart.MAJOR)
        '2.0.0'
    """
    match = SEMVER_PATTERN.match(version)
    if not match:
        raise SkillcheckError(f"'{version}' is not a MAJOR.MINOR.PATCH version")
    major, minor, patch = (int(group) for group in match.groups()[:3])

    if part is VersionPart.MAJOR:
        return f"{major + 1}.0.0"
    if part is VersionPart.MINOR:
        return f"{major}.{minor + 1}.0"
    return f"{major}.{minor}.{patch + 1}"


def _yaml_quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def render_skill_md(name: str, description: str, tags: list[str] | None = None) -> str:
    """Render a new SKILL.md with complete front matter."""
    tag_list = ", ".join(_yaml_quote(tag) for tag in tags or [])
    return f"""---
name: {_yaml_quote(name)}
description: {_yaml_quote(description)}
skill_version: {INITIAL_VERSION}
updated_at: "{utc_timestamp()}"
tags: [{tag_list}]
progressive_disclosure:
  entry_point:
    summary: {_yaml_quote(description)}
    when_to_use: "Describe the situations where this skill applies."
    quick_start: "List the first steps to take."
  references: []
---

# {name}

{description}

## Instructions

Describe what to do, step by step.

## Reference material

Put longer material in {REFERENCES_SUBDIR}/ and list it under
progressive_disclosure.references.
"""


def create_skill(
    root: Path,
    name: str,
    description: str = "",
    tags: list[str] | None = None,
) -> Path:
    """Scaffold a new skill directory.

    Args:
        root: Directory to create the skill in
        name: Skill name (also the directory name)
        description: Initial description
        tags: Initial tags

    Returns:
        Path to the new skill directory

    Raises:
        SkillcheckError: If the name is invalid
        SkillExistsError: If the directory already exists
    """
    if not NAME_PATTERN.match(name):
        raise SkillcheckError(
            f"Invalid skill name '{name}': must be alphanumeric with hyphens/underscores"
        )
    for tag in tags or []:
        if not re.match(r"^[\w-]+$", tag):
            raise SkillcheckError(f"Invalid tag '{tag}': use letters, digits, '-' or '_'")

    skill_dir = root / name
    if skill_dir.exists():
        raise SkillExistsError(f"Skill '{name}' already exists at {skill_dir}")

    (skill_dir / REFERENCES_SUBDIR).mkdir(parents=True)
    (skill_dir / SKILL_MARKER).write_text(
        render_skill_md(name, description or f"Describe what {name} does.", tags),
        encoding="utf-8",
    )
    logger.debug("Created skill %s at %s", name, skill_dir)
    return skill_dir


def bump_skill(skill_dir: Path, part: VersionPart = VersionPart.PATCH) -> str:
    """Increment a skill's skill_version and stamp updated_at.

    A skill with no version is given the initial version instead.

    Args:
        skill_dir: The skill directory
        part: Which version part to increment

    Returns:
        The new version

    Raises:
        SkillcheckError: If the current version is not MAJOR.MINOR.PATCH
    """
    marker = skill_dir / SKILL_MARKER
    document = read_document(marker)
    current = (document.frontmatter or {}).get("skill_version")

    if current is None:
        new_version = INITIAL_VERSION
    else:
        new_version = bump_version(str(current), part)

    update_frontmatter(marker, {"skill_version": new_version, "updated_at": utc_timestamp()})
    logger.debug("Bumped %s from %s to %s", skill_dir.name, current, new_version)
    return new_version
