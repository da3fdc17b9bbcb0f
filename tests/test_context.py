"""Tests for skillcheck.context module."""

import pytest

from skillcheck.context import (
    TRUNCATION_MARKER,
    DisclosureLevel,
    estimate_tokens,
    render_context,
    render_entry,
    resolve_reference,
)
from skillcheck.exceptions import ReferenceNotFoundError
from skillcheck.library import load_skill

LONG_BODY = "\n" + "".join(f"Step {n:02d}: follow the instructions.\n" for n in range(60))


@pytest.fixture
def skill(make_skill):
    return load_skill(make_skill("code-audit"))


class TestEstimateTokens:
    def test_rounds_up(self):
        assert estimate_tokens("") == 0
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2


class TestRenderEntry:
    """Tests for the entry disclosure level."""

    def test_entry_layout(self, skill):
        assert render_entry(skill) == (
            "# code-audit\n"
            "\n"
            "Audit a codebase against the house checklist\n"
            "\n"
            "## Summary\n"
            "Checklist-driven code audit\n"
            "\n"
            "## When to use\n"
            "When reviewing a pull request\n"
            "\n"
            "## Quick start\n"
            "Run the checklist top to bottom\n"
        )

    def test_entry_without_disclosure(self, make_skill):
        skill = load_skill(
            make_skill("plain", frontmatter="name: plain\ndescription: Just a description\n", references={})
        )
        assert render_entry(skill) == "# plain\n\nJust a description\n"

    def test_render_context_defaults_to_entry(self, skill):
        rendered = render_context(skill)
        assert rendered.text == render_entry(skill)
        assert not rendered.truncated
        assert rendered.limit is None


class TestRenderLevels:
    """Tests for the full and reference levels."""

    def test_full_level_is_body(self, skill):
        rendered = render_context(skill, DisclosureLevel.FULL)
        assert rendered.text.startswith("# code-audit\n")
        assert "make audit" in rendered.text

    def test_reference_by_bare_name(self, skill):
        rendered = render_context(skill, DisclosureLevel.REFERENCE, reference="anti-patterns.md")
        assert rendered.text == "# Anti-patterns\n\nAvoid god objects.\n"

    def test_reference_by_relative_path(self, skill):
        rendered = render_context(
            skill, DisclosureLevel.REFERENCE, reference="references/anti-patterns.md"
        )
        assert rendered.text.startswith("# Anti-patterns")

    def test_reference_level_requires_name(self, skill):
        with pytest.raises(ValueError):
            render_context(skill, DisclosureLevel.REFERENCE)

    def test_missing_reference_lists_available(self, skill):
        with pytest.raises(ReferenceNotFoundError, match="references/anti-patterns.md"):
            render_context(skill, DisclosureLevel.REFERENCE, reference="nope.md")

    def test_reference_outside_skill_rejected(self, skill, corpus):
        (corpus / "secret.md").write_text("secret")
        with pytest.raises(ReferenceNotFoundError, match="outside"):
            resolve_reference(skill, "../../secret.md")


class TestContextBudget:
    """Tests for token budgets and truncation."""

    @pytest.fixture
    def long_skill(self, make_skill):
        return load_skill(make_skill("long", body=LONG_BODY))

    def test_explicit_limit_truncates(self, long_skill):
        rendered = render_context(long_skill, DisclosureLevel.FULL, limit=100)

        assert rendered.truncated
        assert rendered.limit == 100
        assert rendered.estimated_tokens <= 100
        assert rendered.text.startswith("Step 00:")
        assert TRUNCATION_MARKER in rendered.text
        assert rendered.text.endswith("[See: references/anti-patterns.md]\n")

    def test_truncation_keeps_whole_lines(self, long_skill):
        rendered = render_context(long_skill, DisclosureLevel.FULL, limit=100)
        head = rendered.text.split(TRUNCATION_MARKER)[0]
        assert all(line.startswith("Step ") for line in head.splitlines())

    def test_skill_context_limit_used(self, make_skill):
        frontmatter = "name: bounded\ndescription: d\ncontext_limit: 50\n"
        skill = load_skill(make_skill("bounded", frontmatter=frontmatter, body=LONG_BODY, references={}))

        rendered = render_context(skill, DisclosureLevel.FULL)

        assert rendered.truncated
        assert rendered.limit == 50
        assert "[See:" not in rendered.text

    @pytest.mark.parametrize("limit", [11, 12, 15, 18, 19, 20, 25, 40])
    def test_small_limits_are_respected(self, long_skill, limit):
        rendered = render_context(long_skill, DisclosureLevel.FULL, limit=limit)
        assert rendered.truncated
        assert rendered.estimated_tokens <= limit
        assert TRUNCATION_MARKER in rendered.text

    def test_reference_list_dropped_when_it_does_not_fit(self, long_skill):
        rendered = render_context(long_skill, DisclosureLevel.FULL, limit=15)
        assert rendered.text.endswith(TRUNCATION_MARKER + "\n")
        assert "[See:" not in rendered.text

    def test_limit_below_marker_gives_marker_only(self, long_skill):
        rendered = render_context(long_skill, DisclosureLevel.FULL, limit=5)
        assert rendered.truncated
        assert rendered.text == TRUNCATION_MARKER + "\n"

    def test_default_limit_is_last_resort(self, long_skill):
        rendered = render_context(long_skill, DisclosureLevel.FULL, default_limit=80)
        assert rendered.truncated
        assert rendered.limit == 80

    def test_within_budget_untouched(self, skill):
        rendered = render_context(skill, DisclosureLevel.ENTRY, limit=10_000)
        assert not rendered.truncated
        assert rendered.text == render_entry(skill)
