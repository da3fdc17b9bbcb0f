"""Tests for skillcheck.rules.markdown module."""

from skillcheck.rules.markdown import Fence, extract_links, normalize_target, scan_fences


class TestScanFences:
    """Tests for code fence pairing."""

    def test_paired_backticks(self):
        assert scan_fences("```py\nx = 1\n```\n") == [Fence(start=1, end=3, marker="```")]

    def test_unclosed_fence(self):
        assert scan_fences("text\n```bash\nmake\n") == [Fence(start=2, end=None, marker="```")]

    def test_tilde_does_not_close_backtick(self):
        fences = scan_fences("```\n~~~\n```\n")
        assert fences == [Fence(start=1, end=3, marker="```")]

    def test_longer_fence_needs_longer_close(self):
        text = "````md\n```python\nprint()\n```\n````\n"
        assert scan_fences(text) == [Fence(start=1, end=5, marker="````")]

    def test_closing_line_with_info_string_does_not_close(self):
        fences = scan_fences("```\ncode\n```bash\n")
        assert fences == [Fence(start=1, end=None, marker="```")]

    def test_inline_backticks_are_not_fences(self):
        assert scan_fences("Use ```inline``` here\n") == []

    def test_indented_up_to_three_spaces(self):
        assert scan_fences("   ```\n   x\n   ```\n") == [Fence(start=1, end=3, marker="```")]
        assert scan_fences("    ```\n") == []

    def test_multiple_blocks(self):
        text = "```\na\n```\n\n~~~\nb\n~~~\n"
        assert [(f.start, f.end) for f in scan_fences(text)] == [(1, 3), (5, 7)]


class TestNormalizeTarget:
    def test_strips_anchor_and_query(self):
        assert normalize_target("references/api.md#routing") == "references/api.md"
        assert normalize_target("guide.md?plain=1") == "guide.md"

    def test_external_targets(self):
        assert normalize_target("https://hono.dev") is None
        assert normalize_target("mailto:team@example.com") is None
        assert normalize_target("#usage") is None

    def test_unquotes(self):
        assert normalize_target("my%20notes.md") == "my notes.md"


class TestExtractLinks:
    """Tests for extract_links."""

    def test_prose_mentions(self):
        links = extract_links("See anti-patterns.md.\nsee: `references/api.md` first\n")
        assert [(link.target, link.line, link.prose) for link in links] == [
            ("anti-patterns.md", 1, True),
            ("references/api.md", 2, True),
        ]

    def test_markdown_links_and_images(self):
        links = extract_links("Read [the guide](guide.md) and ![diagram](img/flow.png \"Flow\").\n")
        assert [link.target for link in links] == ["guide.md", "img/flow.png"]
        assert not any(link.prose for link in links)

    def test_skips_urls(self):
        assert extract_links("[Hono](https://hono.dev)\n") == []

    def test_skips_fenced_code(self):
        text = "```md\nSee missing.md\n[x](missing.md)\n```\n"
        assert extract_links(text) == []

    def test_skips_unclosed_fence_to_end(self):
        assert extract_links("```\nSee missing.md\n") == []

    def test_skips_inline_code_links(self):
        assert extract_links("Write `[x](y.md)` to link\n") == []

    def test_skips_mention_quoted_in_inline_code(self):
        links = extract_links("Write `See notes.md` in the body, see: `api.md` for more\n")
        assert [link.target for link in links] == ["api.md"]

    def test_line_numbers(self):
        links = extract_links("intro\n\n[a](a.md)\n")
        assert links[0].line == 3
