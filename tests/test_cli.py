"""Tests for the skillcheck command-line interface."""

import json
from contextlib import contextmanager

import pytest
from typer.testing import CliRunner

from skillcheck import __version__
from skillcheck.cli.main import app
from skillcheck.config import SkillcheckConfig
from skillcheck.context import TRUNCATION_MARKER
from skillcheck.library import load_skill

runner = CliRunner()


@pytest.fixture
def in_corpus(corpus, monkeypatch):
    """Run commands from inside the corpus root."""
    monkeypatch.chdir(corpus)
    return corpus


class TestGlobalOptions:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"skillcheck {__version__}" in result.output

    def test_verbose_accepted(self, in_corpus, make_skill):
        make_skill("demo")
        result = runner.invoke(app, ["--verbose", "check"])
        assert result.exit_code == 0


class TestCheckCommand:
    """Tests for `skillcheck check`."""

    def test_clean_corpus(self, in_corpus, make_skill):
        make_skill("code-audit")
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 0
        assert "1 skill(s) checked, no problems found" in result.output

    def test_errors_exit_1(self, in_corpus, make_skill):
        make_skill("demo", frontmatter="name: demo\nskill_version: v1\n", references={})
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 1
        assert "skills/demo/SKILL.md:1" in result.output
        assert "[required-fields]" in result.output
        assert "skills/demo/SKILL.md:3" in result.output
        assert "2 error(s)" in result.output

    def test_json_output(self, in_corpus, make_skill):
        make_skill("demo", frontmatter="name: demo\ndescription: d\nowner: x\n", references={})
        result = runner.invoke(app, ["check", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["skills_checked"] == 1
        assert "links-resolve" in data["rules"]
        assert data["warnings"] == 1
        assert data["diagnostics"][0]["rule"] == "unknown-fields"
        assert data["diagnostics"][0]["path"] == "skills/demo/SKILL.md"
        assert data["diagnostics"][0]["line"] == 4

    def test_strict_fails_on_warnings(self, in_corpus, make_skill):
        make_skill("demo", frontmatter="name: demo\ndescription: d\nowner: x\n", references={})
        assert runner.invoke(app, ["check"]).exit_code == 0
        assert runner.invoke(app, ["check", "--strict"]).exit_code == 1

    def test_strict_from_config(self, in_corpus, make_skill):
        (in_corpus / "skillcheck.toml").write_text("[lint]\nstrict = true\n")
        make_skill("demo", frontmatter="name: demo\ndescription: d\nowner: x\n", references={})
        assert runner.invoke(app, ["check"]).exit_code == 1

    def test_rule_filter(self, in_corpus, make_skill):
        make_skill("demo", frontmatter="name: demo\n", body="See missing.md\n", references={})
        result = runner.invoke(app, ["check", "--rule", "links-resolve", "--format", "json"])
        data = json.loads(result.output)
        assert {d["rule"] for d in data["diagnostics"]} == {"links-resolve"}

    def test_unknown_rule(self, in_corpus):
        result = runner.invoke(app, ["check", "--rule", "made-up"])
        assert result.exit_code == 1
        assert "Unknown rule 'made-up'" in result.output

    def test_single_skill_file(self, in_corpus, make_skill):
        make_skill("good")
        make_skill("bad", frontmatter="name: bad\n", references={})
        result = runner.invoke(app, ["check", "skills/good/SKILL.md"])
        assert result.exit_code == 0
        assert "1 skill(s) checked" in result.output

    def test_subdirectory(self, in_corpus, make_skill):
        make_skill("good")
        make_skill("bad", parent=in_corpus / "drafts", frontmatter="name: bad\n", references={})
        assert runner.invoke(app, ["check", "skills"]).exit_code == 0
        assert runner.invoke(app, ["check", "drafts"]).exit_code == 1

    def test_subdirectory_keeps_corpus_root(self, in_corpus, make_skill):
        (in_corpus / "GLOSSARY.md").write_text("# Glossary\n")
        body = "\n# demo\n\nTerms are in the [glossary](/GLOSSARY.md).\n"
        make_skill("demo", frontmatter="name: demo\ndescription: d\n", body=body, references={})

        assert runner.invoke(app, ["check"]).exit_code == 0
        result = runner.invoke(app, ["check", "skills/demo"])
        assert result.exit_code == 0
        assert "1 skill(s) checked, no problems found" in result.output

    def test_subdirectory_reports_corpus_relative_paths(self, in_corpus, make_skill):
        make_skill("demo", frontmatter="name: demo\n", references={})
        result = runner.invoke(app, ["check", "skills"])
        assert "skills/demo/SKILL.md:1" in result.output

    def test_missing_path(self, in_corpus):
        result = runner.invoke(app, ["check", "nowhere"])
        assert result.exit_code == 1
        assert "Path not found" in result.output

    def test_impossible_unquoted_date(self, in_corpus, make_skill):
        make_skill("demo", frontmatter="name: demo\ndescription: d\nupdated_at: 2025-13-45\n", references={})
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "[updated-at]" in result.output

        listed = runner.invoke(app, ["list"])
        assert listed.exit_code == 0
        assert "demo" in listed.output

    def test_invalid_config(self, in_corpus):
        (in_corpus / "skillcheck.toml").write_text("[lint]\nstrict = 'maybe'\n")
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 1
        assert "Error:" in result.output


class TestBrowseCommands:
    """Tests for list, show, context and select."""

    def test_list(self, in_corpus, make_skill):
        make_skill("audit")
        make_skill("deploy", frontmatter="name: deploy\ndescription: d\ntags: [ops]\n", references={})
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "audit" in result.output
        assert "deploy" in result.output

    def test_list_by_tag(self, in_corpus, make_skill):
        make_skill("audit")
        make_skill("deploy", frontmatter="name: deploy\ndescription: d\ntags: [ops]\n", references={})
        result = runner.invoke(app, ["list", "--tag", "ops"])
        assert "deploy" in result.output
        assert "audit" not in result.output

    def test_list_reports_load_failures(self, in_corpus, make_skill):
        make_skill("broken", frontmatter="name: x\n- item\n", references={})
        result = runner.invoke(app, ["list"])
        assert "1 skill(s) failed to load" in result.output
        assert "skills/broken" in result.output

    def test_list_empty(self, in_corpus):
        result = runner.invoke(app, ["list"])
        assert "No skills found" in result.output

    def test_show(self, in_corpus, make_skill):
        make_skill("audit")
        result = runner.invoke(app, ["show", "audit"])
        assert result.exit_code == 0
        assert "1.2.0" in result.output
        assert "Entry point" in result.output
        assert "Checklist-driven code audit" in result.output
        assert "references/anti-patterns.md" in result.output

    def test_show_unknown(self, in_corpus):
        result = runner.invoke(app, ["show", "nope"])
        assert result.exit_code == 1
        assert "Skill 'nope' not found" in result.output

    def test_context_entry(self, in_corpus, make_skill):
        make_skill("audit")
        result = runner.invoke(app, ["context", "audit"])
        assert result.exit_code == 0
        assert result.output.startswith("# audit\n")
        assert "## When to use" in result.output

    def test_context_full(self, in_corpus, make_skill):
        make_skill("audit")
        result = runner.invoke(app, ["context", "audit", "--full"])
        assert "make audit" in result.output

    def test_context_reference(self, in_corpus, make_skill):
        make_skill("audit")
        result = runner.invoke(app, ["context", "audit", "--reference", "anti-patterns.md"])
        assert result.exit_code == 0
        assert "Avoid god objects." in result.output

    def test_context_missing_reference(self, in_corpus, make_skill):
        make_skill("audit")
        result = runner.invoke(app, ["context", "audit", "--reference", "nope.md"])
        assert result.exit_code == 1
        assert "Reference 'nope.md' not found" in result.output

    def test_context_limit(self, in_corpus, make_skill):
        body = "".join(f"Line {n} of a long skill body.\n" for n in range(100))
        make_skill("long", body=body)
        result = runner.invoke(app, ["context", "long", "--full", "--limit", "50"])
        assert result.exit_code == 0
        assert TRUNCATION_MARKER in result.output

    def test_context_conflicting_options(self, in_corpus, make_skill):
        make_skill("audit")
        result = runner.invoke(app, ["context", "audit", "--full", "--reference", "anti-patterns.md"])
        assert result.exit_code == 1

    def test_select(self, in_corpus, make_skill):
        make_skill("audit")
        make_skill("deploy", frontmatter="name: deploy\ndescription: Ship to production\n", references={})
        result = runner.invoke(app, ["select", "ship it to production"])
        assert result.exit_code == 0
        assert "deploy" in result.output
        assert "audit" not in result.output

    def test_select_no_match(self, in_corpus, make_skill):
        make_skill("audit")
        result = runner.invoke(app, ["select", "quantum chemistry"])
        assert "No matching skills" in result.output


class TestAuthorCommands:
    """Tests for new, bump and init."""

    def test_new_in_skills_dir(self, in_corpus):
        result = runner.invoke(app, ["new", "fresh", "-d", "A fresh skill", "-t", "demo"])
        assert result.exit_code == 0
        skill = load_skill(in_corpus / "skills" / "fresh")
        assert skill.metadata.description == "A fresh skill"
        assert skill.metadata.tags == ["demo"]
        assert runner.invoke(app, ["check"]).exit_code == 0

    def test_new_existing(self, in_corpus, make_skill):
        make_skill("taken")
        result = runner.invoke(app, ["new", "taken"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_new_invalid_name(self, in_corpus):
        result = runner.invoke(app, ["new", "bad name"])
        assert result.exit_code == 1
        assert "Invalid skill name" in result.output

    def test_bump(self, in_corpus, make_skill):
        skill_dir = make_skill("audit")
        result = runner.invoke(app, ["bump", "audit", "--part", "minor"])
        assert result.exit_code == 0
        assert "1.2.0 -> 1.3.0" in result.output
        assert load_skill(skill_dir).metadata.skill_version == "1.3.0"

    def test_init(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        config = SkillcheckConfig.load(tmp_path / "skillcheck.toml")
        assert config.lint.exclude == ["node_modules/**"]

        again = runner.invoke(app, ["init"])
        assert "already exists" in again.output


class TestVendorCommands:
    """Tests for `skillcheck vendor`."""

    @pytest.fixture
    def fake_repo(self, tmp_path, monkeypatch):
        repo_dir = tmp_path / "upstream"
        skill_dir = repo_dir / "skills" / "hono"
        skill_dir.mkdir(parents=True)
        (skill_dir / "SKILL.md").write_text("---\nname: hono\ndescription: Build Hono apps\n---\n# Hono\n")

        @contextmanager
        def fake_downloaded_repo(owner, repo, branch="main"):
            yield repo_dir

        monkeypatch.setattr("skillcheck.fetcher.vendor.downloaded_repo", fake_downloaded_repo)
        return repo_dir

    def test_add_and_update(self, in_corpus, fake_repo):
        result = runner.invoke(app, ["vendor", "add", "acme/skills/skills/hono"])
        assert result.exit_code == 0
        assert "Vendored hono at vendor/hono" in result.output
        assert (in_corpus / "vendor" / "hono" / "SKILL.md").is_file()

        result = runner.invoke(app, ["vendor", "update", "hono"])
        assert result.exit_code == 0
        assert "Updated hono from acme/skills/skills/hono" in result.output

    def test_add_existing_without_force(self, in_corpus, fake_repo):
        runner.invoke(app, ["vendor", "add", "acme/skills/skills/hono"])
        result = runner.invoke(app, ["vendor", "add", "acme/skills/skills/hono"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_add_rejects_escaping_name(self, in_corpus, fake_repo):
        result = runner.invoke(app, ["vendor", "add", "acme/skills/skills/hono", "--name", "../hono", "--force"])
        assert result.exit_code == 1
        assert "Invalid local name" in result.output
        assert not (in_corpus / "hono").exists()

    def test_invalid_source(self, in_corpus):
        result = runner.invoke(app, ["vendor", "add", "just-a-name"])
        assert result.exit_code == 1
        assert "Invalid source" in result.output

    def test_update_unknown(self, in_corpus):
        result = runner.invoke(app, ["vendor", "update", "nope"])
        assert result.exit_code == 1
        assert "No vendored skill named 'nope'" in result.output
