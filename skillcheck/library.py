"""Loading skills and querying a corpus of them.

The SkillLibrary is what a host agent sees: skills looked up by name or tag,
and automatic selection driven by each skill's description.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from skillcheck.config import SkillcheckConfig
from skillcheck.constants import SKILL_MARKER
from skillcheck.discovery import discover_skills
from skillcheck.exceptions import FrontmatterError, SkillNotFoundError
from skillcheck.frontmatter import read_document
from skillcheck.model import Skill, SkillMetadata

logger = logging.getLogger(__name__)

_WORD = re.compile(r"[a-z0-9]+")

# Words too common to carry any selection signal
_STOPWORDS = frozenset(
    "a an and are as at be by for from how i in is it of on or the this to use when with".split()
)

# Weights for where a query word matched
NAME_WEIGHT = 3
TAG_WEIGHT = 2
TEXT_WEIGHT = 1


def load_skill(path: Path) -> Skill:
    """Load a skill from its directory or its SKILL.md path.

    Args:
        path: Skill directory, or the SKILL.md inside it

    Returns:
        The loaded Skill

    Raises:
        SkillNotFoundError: If there is no SKILL.md
        FrontmatterError: If the front matter is unterminated or invalid YAML
    """
    skill_dir = path.parent if path.name == SKILL_MARKER else path
    marker = skill_dir / SKILL_MARKER
    if not marker.is_file():
        raise SkillNotFoundError(f"{SKILL_MARKER} not found in {skill_dir}")

    document = read_document(marker)
    return Skill(
        metadata=SkillMetadata.from_frontmatter(document.frontmatter),
        path=skill_dir,
        body=document.body,
        body_start_line=document.body_start_line,
        raw_frontmatter=document.frontmatter,
    )


def _words(text: str | None) -> set[str]:
    if not text:
        return set()
    return {w for w in _WORD.findall(text.lower()) if w not in _STOPWORDS}


@dataclass
class SelectionMatch:
    """A skill scored against a selection query."""

    skill: Skill
    score: int
    matched: list[str] = field(default_factory=list)


def score_skill(skill: Skill, query: str) -> SelectionMatch:
    """Score how well a skill matches a natural-language query.

    Each distinct query word scores once, at the weight of the strongest
    place it appears: the skill name, a tag, or the description and
    when-to-use text.
    """
    metadata = skill.metadata
    name_words = _words(skill.name.replace("-", " ").replace("_", " "))
    tag_words: set[str] = set()
    for tag in metadata.tags:
        tag_words |= _words(tag)
    text_words = _words(metadata.description) | _words(metadata.entry_point.when_to_use)

    score = 0
    matched: list[str] = []
    for word in sorted(_words(query)):
        if word in name_words:
            score += NAME_WEIGHT
        elif word in tag_words:
            score += TAG_WEIGHT
        elif word in text_words:
            score += TEXT_WEIGHT
        else:
            continue
        matched.append(word)
    return SelectionMatch(skill=skill, score=score, matched=matched)


@dataclass
class LoadFailure:
    """A skill directory that could not be loaded."""

    path: Path
    error: str
    line: int | None = None


@dataclass
class SkillLibrary:
    """All loadable skills of a corpus, indexed by name."""

    root: Path
    skills: list[Skill] = field(default_factory=list)
    failures: list[LoadFailure] = field(default_factory=list)

    @classmethod
    def from_root(cls, root: Path, config: SkillcheckConfig | None = None) -> "SkillLibrary":
        """Load every skill discovered under root.

        Skills that fail to load are recorded in ``failures`` rather than
        aborting the whole load.

        Args:
            root: Corpus root directory
            config: Optional config supplying exclude globs

        Returns:
            The populated SkillLibrary
        """
        exclude = config.lint.exclude if config else ()
        library = cls(root=root)
        for skill_dir in discover_skills(root, exclude):
            try:
                library.skills.append(load_skill(skill_dir))
            except FrontmatterError as e:
                logger.debug("Failed to load %s: %s", skill_dir, e)
                library.failures.append(LoadFailure(path=skill_dir, error=str(e), line=e.line))
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Failed to read %s: %s", skill_dir, e)
                library.failures.append(LoadFailure(path=skill_dir, error=str(e)))
        return library

    def names(self) -> list[str]:
        return sorted({skill.name for skill in self.skills})

    def get(self, name: str) -> Skill:
        """Get a skill by declared name, falling back to directory name.

        Raises:
            SkillNotFoundError: If no skill matches
        """
        for skill in self.skills:
            if skill.metadata.name == name:
                return skill
        for skill in self.skills:
            if skill.path.name == name:
                return skill
        raise SkillNotFoundError(f"Skill '{name}' not found under {self.root}")

    def by_tag(self, tag: str) -> list[Skill]:
        return [skill for skill in self.skills if tag in skill.metadata.tags]

    def select(self, query: str, limit: int = 5) -> list[SelectionMatch]:
        """Rank skills for a natural-language query.

        Args:
            query: What the host is trying to do
            limit: Maximum number of matches to return

        Returns:
            Matches with a positive score, best first, ties broken by name
        """
        matches = [score_skill(skill, query) for skill in self.skills]
        matches = [m for m in matches if m.score > 0]
        matches.sort(key=lambda m: (-m.score, m.skill.name))
        return matches[:limit]
