"""Vendoring: copy skills from GitHub repositories into the corpus."""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from skillcheck.authoring import utc_timestamp
from skillcheck.config import SkillcheckConfig
from skillcheck.discovery import discover_skills, find_skill, is_skill_dir
from skillcheck.exceptions import SkillcheckError, SkillExistsError, SkillNotFoundError
from skillcheck.fetcher.download import downloaded_repo
from skillcheck.handle import SkillSource, parse_source
from skillcheck.rules.metadata import NAME_PATTERN

logger = logging.getLogger(__name__)


@dataclass
class VendorResult:
    """Outcome of vendoring one skill."""

    name: str
    path: Path
    source: str
    replaced: bool = False


def find_skill_in_repo(repo_dir: Path, source: SkillSource, name: str | None = None) -> Path:
    """Locate the skill a source refers to inside a downloaded repository.

    An explicit path wins. Otherwise the skill is searched for by name, and
    a repository holding exactly one skill needs no name at all.

    Args:
        repo_dir: Extracted repository root
        source: Parsed source reference
        name: Skill name to search for when the source has no path

    Returns:
        Path to the skill directory

    Raises:
        SkillNotFoundError: If nothing matches, or the choice is ambiguous
    """
    if source.path_segments:
        candidate = repo_dir.joinpath(*source.path_segments)
        if is_skill_dir(candidate):
            return candidate
        found = find_skill(repo_dir, source.path_segments[-1])
        if found is not None:
            return found
        raise SkillNotFoundError(f"No skill at '{'/'.join(source.path_segments)}' in {source.owner}/{source.repo}")

    if name:
        found = find_skill(repo_dir, name)
        if found is None:
            raise SkillNotFoundError(f"Skill '{name}' not found in {source.owner}/{source.repo}")
        return found

    skills = discover_skills(repo_dir)
    if len(skills) == 1:
        return skills[0]
    if not skills:
        raise SkillNotFoundError(f"No skills found in {source.owner}/{source.repo}")
    names = ", ".join(sorted(p.name for p in skills))
    raise SkillNotFoundError(
        f"{source.owner}/{source.repo} contains {len(skills)} skills ({names}); "
        "add the skill path to the source"
    )


def _vendor_destination(config: SkillcheckConfig, name: str) -> Path:
    """Directory a skill called name is vendored into.

    Raises:
        SkillcheckError: If name is not a plain skill name inside the vendor directory
    """
    dest = config.vendor_path / name
    if not NAME_PATTERN.match(name) or not dest.resolve().is_relative_to(config.vendor_path.resolve()):
        raise SkillcheckError(
            f"Invalid local name '{name}': must be alphanumeric with hyphens/underscores. "
            "Use --name to pick another"
        )
    return dest


def vendor_skill(
    source_ref: str,
    config: SkillcheckConfig,
    name: str | None = None,
    overwrite: bool = False,
) -> VendorResult:
    """Download a skill from GitHub and copy it into the vendor directory.

    The source is recorded under [vendor.<name>] in skillcheck.toml so the
    skill can be refreshed later with update_vendored().

    Args:
        source_ref: Source reference, e.g. "owner/repo/skills/name"
        config: Corpus config (vendor directory and record of sources)
        name: Local name for the skill (defaults to its directory name)
        overwrite: Replace an existing local copy

    Returns:
        VendorResult describing the copy

    Raises:
        InvalidSourceError: If source_ref can't be parsed
        RepoNotFoundError: If the repository doesn't exist
        SkillNotFoundError: If the skill can't be found in the repository
        SkillExistsError: If the destination exists and overwrite is False
        SkillcheckError: If the local name is not a valid skill name
    """
    source = parse_source(source_ref)
    if name:
        _vendor_destination(config, name)

    with downloaded_repo(source.owner, source.repo) as repo_dir:
        skill_dir = find_skill_in_repo(repo_dir, source, name)
        local_name = name or skill_dir.name
        dest = _vendor_destination(config, local_name)

        replaced = dest.exists()
        if replaced and not overwrite:
            raise SkillExistsError(
                f"Skill '{local_name}' already exists at {dest}. Use --force to replace it"
            )
        if replaced:
            shutil.rmtree(dest)

        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(skill_dir, dest)
        logger.debug("Copied %s to %s", skill_dir, dest)

    config.record_vendored(local_name, str(source), utc_timestamp())
    config.save()

    return VendorResult(name=local_name, path=dest, source=str(source), replaced=replaced)


def update_vendored(name: str, config: SkillcheckConfig) -> VendorResult:
    """Re-fetch a previously vendored skill from its recorded source.

    Raises:
        SkillNotFoundError: If no [vendor.<name>] entry exists
    """
    entry = config.vendored.get(name)
    if entry is None:
        raise SkillNotFoundError(f"No vendored skill named '{name}' in {config.path.name}")
    return vendor_skill(entry.source, config, name=name, overwrite=True)
