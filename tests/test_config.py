"""Tests for skillcheck.config module."""

import pytest

from skillcheck.config import (
    LintSettings,
    SkillcheckConfig,
    find_config,
    load_config,
)
from skillcheck.constants import KNOWN_TOOLS
from skillcheck.exceptions import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)

FULL_CONFIG = """\
[lint]
exclude = ["node_modules/**"]
select = ["links-resolve"]
ignore = ["unknown-fields"]
strict = true
severity = { name-format = "error" }

[context]
default_limit = 1200

[tools]
allowed = ["Read", "Grep"]

[paths]
vendor = "third_party"

[vendor.hono]
source = "yusukebe/hono-skills/skills/hono"
vendored_at = "2026-01-12T08:30:00+00:00"
"""


class TestSkillcheckConfigLoad:
    """Tests for SkillcheckConfig.load."""

    def test_load_full(self, tmp_path):
        path = tmp_path / "skillcheck.toml"
        path.write_text(FULL_CONFIG)

        config = SkillcheckConfig.load(path)

        assert config.root == tmp_path
        assert config.lint.exclude == ["node_modules/**"]
        assert config.lint.select == ["links-resolve"]
        assert config.lint.ignore == ["unknown-fields"]
        assert config.lint.strict is True
        assert config.lint.severity == {"name-format": "error"}
        assert config.default_context_limit == 1200
        assert config.allowed_tools == ("Read", "Grep")
        assert config.vendor_path == tmp_path / "third_party"
        assert config.vendored["hono"].source == "yusukebe/hono-skills/skills/hono"
        assert config.vendored["hono"].vendored_at == "2026-01-12T08:30:00+00:00"

    def test_load_empty_uses_defaults(self, tmp_path):
        path = tmp_path / "skillcheck.toml"
        path.write_text("")

        config = SkillcheckConfig.load(path)

        assert config.lint == LintSettings()
        assert config.default_context_limit is None
        assert config.allowed_tools == KNOWN_TOOLS
        assert config.vendor_path == tmp_path / "vendor"
        assert config.vendored == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            SkillcheckConfig.load(tmp_path / "skillcheck.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "skillcheck.toml"
        path.write_text("[lint\nexclude = ")
        with pytest.raises(ConfigParseError):
            SkillcheckConfig.load(path)

    @pytest.mark.parametrize(
        "content, message",
        [
            ('[lint]\nseverity = { name-format = "fatal" }\n', "invalid severity"),
            ('[lint]\nexclude = "vendor/*"\n', "list of strings"),
            ('[lint]\nstrict = "yes"\n', "boolean"),
            ("[context]\ndefault_limit = -1\n", "non-negative integer"),
            ('context = "big"\n', "must be a table"),
            ('[paths]\nvendor = ""\n', "non-empty string"),
            ('[vendor.hono]\nvendored_at = "2026-01-01"\n', "missing required 'source'"),
        ],
    )
    def test_validation_errors(self, tmp_path, content, message):
        path = tmp_path / "skillcheck.toml"
        path.write_text(content)
        with pytest.raises(ConfigValidationError, match=message):
            SkillcheckConfig.load(path)


class TestSkillcheckConfigSave:
    """Tests for SkillcheckConfig.save."""

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "skillcheck.toml"
        path.write_text(FULL_CONFIG)
        original = SkillcheckConfig.load(path)

        original.save()
        reloaded = SkillcheckConfig.load(path)

        assert reloaded.lint == original.lint
        assert reloaded.default_context_limit == original.default_context_limit
        assert reloaded.allowed_tools == original.allowed_tools
        assert reloaded.vendor_dir == original.vendor_dir
        assert reloaded.vendored == original.vendored

    def test_defaults_save_empty(self, tmp_path):
        config = SkillcheckConfig(path=tmp_path / "skillcheck.toml")
        config.save()
        assert (tmp_path / "skillcheck.toml").read_text() == ""

    def test_record_vendored(self, tmp_path):
        config = SkillcheckConfig(path=tmp_path / "skillcheck.toml")
        config.record_vendored("hono", "a/b/skills/hono", "2026-01-01T00:00:00+00:00")
        config.save()

        reloaded = SkillcheckConfig.load(tmp_path / "skillcheck.toml")
        assert reloaded.vendored["hono"].source == "a/b/skills/hono"


class TestFindConfig:
    """Tests for find_config and load_config."""

    def test_finds_in_parent(self, tmp_path):
        (tmp_path / "skillcheck.toml").write_text("")
        nested = tmp_path / "skills" / "demo"
        nested.mkdir(parents=True)

        assert find_config(nested) == tmp_path / "skillcheck.toml"

    def test_uses_cwd_by_default(self, tmp_path, monkeypatch):
        (tmp_path / "skillcheck.toml").write_text("")
        monkeypatch.chdir(tmp_path)
        assert find_config() == tmp_path / "skillcheck.toml"

    def test_not_found(self, tmp_path):
        assert find_config(tmp_path) is None

    def test_load_config_defaults_to_start_dir(self, tmp_path, monkeypatch):
        monkeypatch.setattr("skillcheck.config.find_config", lambda start=None: None)

        config = load_config(tmp_path)

        assert config.path == tmp_path.resolve() / "skillcheck.toml"
        assert not config.path.exists()

    def test_load_config_reads_nearest(self, tmp_path):
        (tmp_path / "skillcheck.toml").write_text("[context]\ndefault_limit = 300\n")
        nested = tmp_path / "skills"
        nested.mkdir()

        assert load_config(nested).default_context_limit == 300
