"""Test configuration and fixtures."""

import os
from pathlib import Path

import pytest

from skillcheck.config import SkillcheckConfig
from skillcheck.rules.registry import get_registry_snapshot, restore_registry_snapshot


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "network: tests that make real network requests")
    config.addinivalue_line("markers", "slow: tests taking > 5 seconds")


@pytest.fixture(autouse=True)
def skip_network_unless_enabled(request):
    """Skip network tests unless SKILLCHECK_NETWORK_TESTS is set."""
    if request.node.get_closest_marker("network"):
        if os.environ.get("SKILLCHECK_NETWORK_TESTS", "").lower() not in ("1", "true", "yes"):
            pytest.skip("network tests disabled (set SKILLCHECK_NETWORK_TESTS=1)")


VALID_FRONTMATTER = """\
name: {name}
description: Audit a codebase against the house checklist
skill_version: "1.2.0"
updated_at: "2025-01-15T10:30:00Z"
tags: [review, quality]
progressive_disclosure:
  entry_point:
    summary: Checklist-driven code audit
    when_to_use: When reviewing a pull request
    quick_start: Run the checklist top to bottom
  references:
    - references/anti-patterns.md
"""

DEFAULT_REFERENCES = {"anti-patterns.md": "# Anti-patterns\n\nAvoid god objects.\n"}


def write_skill(
    parent: Path,
    name: str,
    frontmatter: str | None = None,
    body: str | None = None,
    references: dict[str, str] | None = None,
) -> Path:
    """Write a skill directory under parent and return it.

    Defaults produce a skill that passes every built-in rule.
    """
    skill_dir = parent / name
    skill_dir.mkdir(parents=True)

    if frontmatter is None:
        frontmatter = VALID_FRONTMATTER.format(name=name)
    if references is None:
        references = DEFAULT_REFERENCES
    if body is None:
        body = f"\n# {name}\n\n"
        if "anti-patterns.md" in references:
            body += "See anti-patterns.md for what to avoid.\n\n"
        body += "```bash\nmake audit\n```\n"
    (skill_dir / "SKILL.md").write_text(f"---\n{frontmatter}---\n{body}", encoding="utf-8")

    for rel, text in references.items():
        path = skill_dir / "references" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    return skill_dir


@pytest.fixture
def corpus(tmp_path: Path) -> Path:
    """An empty corpus: a directory with skillcheck.toml and skills/."""
    (tmp_path / "skillcheck.toml").write_text("")
    (tmp_path / "skills").mkdir()
    return tmp_path


@pytest.fixture
def make_skill(corpus: Path):
    """Factory writing skills under the corpus skills/ directory."""
    def _make(name: str, parent: Path | None = None, **kwargs) -> Path:
        return write_skill(parent or corpus / "skills", name, **kwargs)
    return _make


@pytest.fixture
def config(corpus: Path) -> SkillcheckConfig:
    """Config loaded from the corpus skillcheck.toml."""
    return SkillcheckConfig.load(corpus / "skillcheck.toml")


@pytest.fixture
def clean_registry():
    """Snapshot the rule registry and restore it after the test."""
    snapshot = get_registry_snapshot()
    yield
    restore_registry_snapshot(snapshot)
