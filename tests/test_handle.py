"""Tests for skillcheck.handle module."""

import pytest

from skillcheck.exceptions import InvalidSourceError
from skillcheck.handle import SkillSource, parse_source


class TestParseSource:
    """Tests for parse_source."""

    def test_owner_repo(self):
        source = parse_source("honojs/skills")
        assert source.owner == "honojs"
        assert source.repo == "skills"
        assert source.path_segments == []
        assert source.skill_name is None

    def test_with_path(self):
        source = parse_source("honojs/skills/skills/hono-workers")
        assert source.path_segments == ["skills", "hono-workers"]
        assert source.skill_name == "hono-workers"

    def test_github_url(self):
        source = parse_source("https://github.com/honojs/skills/")
        assert (source.owner, source.repo) == ("honojs", "skills")

    def test_round_trip_string(self):
        assert str(parse_source("honojs/skills/skills/hono")) == "honojs/skills/skills/hono"

    @pytest.mark.parametrize("ref", ["", "honojs", "honojs//skills", "honojs/skills/../etc", "a/./b"])
    def test_invalid(self, ref):
        with pytest.raises(InvalidSourceError):
            parse_source(ref)


class TestSkillSource:
    def test_str_without_path(self):
        assert str(SkillSource("honojs", "skills")) == "honojs/skills"
