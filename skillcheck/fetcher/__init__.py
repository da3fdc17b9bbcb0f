"""Fetching skills from GitHub for vendoring into a corpus."""

from skillcheck.fetcher.download import downloaded_repo, tarball_url
from skillcheck.fetcher.vendor import (
    VendorResult,
    find_skill_in_repo,
    update_vendored,
    vendor_skill,
)

__all__ = [
    "downloaded_repo",
    "tarball_url",
    "VendorResult",
    "find_skill_in_repo",
    "update_vendored",
    "vendor_skill",
]
