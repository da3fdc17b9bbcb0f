"""Shared exception classes for skillcheck."""


class SkillcheckError(Exception):
    """Base exception for skillcheck errors."""


class FrontmatterError(SkillcheckError):
    """Raised when a document's YAML front matter is missing a delimiter or unparseable."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


class SkillNotFoundError(SkillcheckError):
    """Raised when a skill doesn't exist in the corpus or repository."""


class SkillExistsError(SkillcheckError):
    """Raised when a skill directory already exists at the destination."""


class ReferenceNotFoundError(SkillcheckError):
    """Raised when a requested reference document can't be found for a skill."""


class RepoNotFoundError(SkillcheckError):
    """Raised when the GitHub repo doesn't exist."""


class InvalidSourceError(SkillcheckError):
    """Raised when a vendoring source reference can't be parsed."""


class ConfigNotFoundError(SkillcheckError):
    """Raised when skillcheck.toml is not found."""


class ConfigParseError(SkillcheckError):
    """Raised when skillcheck.toml cannot be parsed."""


class ConfigValidationError(SkillcheckError):
    """Raised when skillcheck.toml contains invalid configuration."""
