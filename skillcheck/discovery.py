"""Skill discovery in a corpus directory tree.

A skill is any directory containing a SKILL.md marker. Skills may be nested
(vendored skills usually live under a vendor/ directory), so discovery walks
the whole tree, skipping hidden directories and configured exclude globs.
"""

import fnmatch
import logging
from pathlib import Path

from skillcheck.constants import SKILL_MARKER
from skillcheck.exceptions import FrontmatterError
from skillcheck.frontmatter import read_document

logger = logging.getLogger(__name__)


def is_skill_dir(path: Path) -> bool:
    """Check if a path is a skill directory (contains SKILL.md)."""
    return path.is_dir() and (path / SKILL_MARKER).is_file()


def is_excluded(rel_path: str, exclude: tuple[str, ...] | list[str]) -> bool:
    """Check a corpus-relative POSIX path against exclude globs.

    A pattern ending in ``/**`` also excludes the directory itself.

    Examples:
        >>> is_excluded("node_modules/pkg", ["node_modules/**"])
        True
        >>> is_excluded("node_modules", ["node_modules/**"])
        True
        >>> is_excluded("skills/hono", ["vendor/*"])
        False
    """
    for pattern in exclude:
        if fnmatch.fnmatch(rel_path, pattern):
            return True
        if pattern.endswith("/**") and rel_path == pattern[:-3]:
            return True
    return False


def _walk(directory: Path, root: Path, exclude: tuple[str, ...], found: list[Path]) -> None:
    if is_skill_dir(directory):
        found.append(directory)

    try:
        children = sorted(directory.iterdir())
    except OSError as e:
        logger.warning("Cannot list %s: %s", directory, e)
        return

    for child in children:
        if not child.is_dir() or child.name.startswith("."):
            continue
        rel = child.relative_to(root).as_posix()
        if is_excluded(rel, exclude):
            logger.debug("Excluded %s", rel)
            continue
        _walk(child, root, exclude, found)


def discover_skills(
    root: Path,
    exclude: tuple[str, ...] | list[str] = (),
    start: Path | None = None,
) -> list[Path]:
    """Discover all skill directories below a corpus root.

    Args:
        root: Corpus root directory (itself a candidate)
        exclude: Glob patterns of corpus-relative paths to skip
        start: Only walk this directory inside root; exclude globs stay
            relative to root

    Returns:
        Sorted list of skill directory paths
    """
    start = start or root
    if not start.is_dir():
        return []
    found: list[Path] = []
    _walk(start, root, tuple(exclude), found)
    logger.debug("Discovered %d skill(s) under %s", len(found), start)
    return sorted(found)


def find_skill(
    root: Path,
    name: str,
    exclude: tuple[str, ...] | list[str] = (),
) -> Path | None:
    """Find a skill directory by name.

    The front matter ``name`` takes precedence over the directory name, so a
    skill renamed in its metadata is found under its declared identity.

    Args:
        root: Corpus root directory
        name: Skill name to look for
        exclude: Glob patterns of corpus-relative paths to skip

    Returns:
        Path to the skill directory if found, None otherwise
    """
    candidates = discover_skills(root, exclude)

    for skill_dir in candidates:
        try:
            document = read_document(skill_dir / SKILL_MARKER)
        except (FrontmatterError, OSError, UnicodeDecodeError):
            continue
        if document.frontmatter and document.frontmatter.get("name") == name:
            return skill_dir

    for skill_dir in candidates:
        if skill_dir.name == name:
            return skill_dir

    return None
