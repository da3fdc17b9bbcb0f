"""HTTP and tarball download operations for fetching skill repositories."""

import logging
import tarfile
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import httpx

from skillcheck.exceptions import RepoNotFoundError, SkillcheckError

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"


def tarball_url(owner: str, repo: str, branch: str = DEFAULT_BRANCH) -> str:
    """Build the GitHub archive URL for a branch."""
    return f"https://github.com/{owner}/{repo}/archive/refs/heads/{branch}.tar.gz"


def _extract(tarball_path: Path, extract_path: Path) -> Path:
    """Extract a tarball and return its single top-level directory."""
    with tarfile.open(tarball_path, "r:gz") as tar:
        tar.extractall(extract_path, filter="data")

    entries = [p for p in extract_path.iterdir() if p.is_dir()]
    if len(entries) != 1:
        raise SkillcheckError("Unexpected archive layout: expected one top-level directory")
    return entries[0]


def _download_and_extract_tarball(url: str, owner: str, repo: str, tmp_path: Path) -> Path:
    """Download and extract a GitHub tarball, returning the repo directory path."""
    tarball_path = tmp_path / "repo.tar.gz"

    logger.debug("Downloading %s", url)
    try:
        with httpx.Client(follow_redirects=True, timeout=30.0) as client:
            response = client.get(url)
            if response.status_code == 404:
                raise RepoNotFoundError(
                    f"Repository '{owner}/{repo}' not found on GitHub."
                )
            response.raise_for_status()
            tarball_path.write_bytes(response.content)
    except httpx.HTTPStatusError as e:
        raise SkillcheckError(f"Failed to download repository: {e}")
    except httpx.RequestError as e:
        raise SkillcheckError(f"Network error: {e}")

    try:
        return _extract(tarball_path, tmp_path / "extracted")
    except tarfile.TarError as e:
        raise SkillcheckError(f"Downloaded archive is not a valid tarball: {e}")


@contextmanager
def downloaded_repo(
    owner: str, repo: str, branch: str = DEFAULT_BRANCH
) -> Generator[Path, None, None]:
    """
    Context manager that downloads a repo tarball and yields the repo directory.

    The extracted tree lives in a temporary directory that is removed when
    the context exits, so copy what you need out of it first.

    Args:
        owner: GitHub user or organization
        repo: GitHub repository name
        branch: Branch to download

    Yields:
        Path to the extracted repository directory

    Raises:
        RepoNotFoundError: If the repository doesn't exist
    """
    with tempfile.TemporaryDirectory() as tmp_dir:
        repo_dir = _download_and_extract_tarball(
            tarball_url(owner, repo, branch), owner, repo, Path(tmp_dir)
        )
        yield repo_dir
