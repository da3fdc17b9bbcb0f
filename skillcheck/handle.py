"""Parsing of vendoring source references.

A source names a GitHub repository and, optionally, the path of a skill
inside it:

| Form                          | Example                               |
|-------------------------------|---------------------------------------|
| ``owner/repo``                | ``honojs/skills``                     |
| ``owner/repo/path/to/skill``  | ``honojs/skills/skills/hono-workers`` |
"""

from dataclasses import dataclass, field

from skillcheck.exceptions import InvalidSourceError


@dataclass
class SkillSource:
    """Parsed source reference.

    Attributes:
        owner: GitHub user or organization
        repo: Repository name
        path_segments: Path of the skill directory inside the repository,
                       empty when the skill should be found by search
    """

    owner: str
    repo: str
    path_segments: list[str] = field(default_factory=list)

    @property
    def skill_name(self) -> str | None:
        """Last path segment, the presumed skill directory name."""
        return self.path_segments[-1] if self.path_segments else None

    def __str__(self) -> str:
        """Convert back to the owner/repo/path form.

        Examples:
            >>> str(SkillSource("honojs", "skills", ["skills", "hono"]))
            'honojs/skills/skills/hono'
            >>> str(SkillSource("honojs", "skills"))
            'honojs/skills'
        """
        return "/".join([self.owner, self.repo, *self.path_segments])


def parse_source(ref: str) -> SkillSource:
    """Parse a source reference string.

    Args:
        ref: Reference such as "owner/repo" or "owner/repo/skills/name"

    Returns:
        The parsed SkillSource

    Raises:
        InvalidSourceError: If the reference has fewer than two parts,
            empty segments, or parent-directory segments

    Examples:
        >>> parse_source("honojs/skills/skills/hono").path_segments
        ['skills', 'hono']
        >>> parse_source("honojs/skills").skill_name is None
        True
    """
    cleaned = ref.strip().strip("/")
    if cleaned.startswith("https://github.com/"):
        cleaned = cleaned[len("https://github.com/"):]
    parts = cleaned.split("/") if cleaned else []

    if len(parts) < 2:
        raise InvalidSourceError(
            f"Invalid source '{ref}'. Expected: <owner>/<repo> or <owner>/<repo>/<path>"
        )
    if any(not part for part in parts):
        raise InvalidSourceError(f"Invalid source '{ref}': contains empty path segments")
    if any(part in (".", "..") for part in parts):
        raise InvalidSourceError(f"Invalid source '{ref}': relative segments are not allowed")

    owner, repo, *segments = parts
    return SkillSource(owner=owner, repo=repo, path_segments=segments)
