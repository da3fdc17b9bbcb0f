"""Markdown scanning helpers: code fences and local link extraction."""

import re
from dataclasses import dataclass
from urllib.parse import unquote

# CommonMark fences: up to 3 spaces of indent, then 3+ backticks or tildes
_FENCE_OPEN = re.compile(r"^ {0,3}(`{3,}|~{3,})(.*)$")
_FENCE_CLOSE = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*$")

_INLINE_CODE = re.compile(r"(`+)(?:(?!\1).)+?\1")
_MD_LINK = re.compile(r"!?\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+[\"'(][^)]*)?\)")
_PROSE_REF = re.compile(r"\b[Ss]ee:?\s+[`\"']?([\w./-]+\.md)\b")
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


@dataclass(frozen=True)
class Fence:
    """A fenced code block, by 1-based line numbers within the scanned text."""

    start: int
    end: int | None  # None when never closed
    marker: str


@dataclass(frozen=True)
class LinkRef:
    """A local file reference found in prose."""

    target: str
    line: int
    prose: bool  # True for "See X.md" mentions, False for markdown links


def scan_fences(text: str) -> list[Fence]:
    """Find every fenced code block in a markdown text.

    A fence closes on a line made only of the same fence character, at
    least as many of them as opened it. A backtick fence's info string may
    not contain backticks (such a line is inline code, not a fence).

    Examples:
        >>> scan_fences("```py\\nx\\n```\\n")
        [Fence(start=1, end=3, marker='```')]
        >>> scan_fences("~~~\\n```\\n")
        [Fence(start=1, end=None, marker='~~~')]
    """
    fences: list[Fence] = []
    open_fence: tuple[int, str] | None = None

    for number, line in enumerate(text.splitlines(), start=1):
        if open_fence is None:
            match = _FENCE_OPEN.match(line)
            if not match:
                continue
            marker, info = match.group(1), match.group(2)
            if marker[0] == "`" and "`" in info:
                continue
            open_fence = (number, marker)
        else:
            start, marker = open_fence
            match = _FENCE_CLOSE.match(line)
            if match and match.group(1)[0] == marker[0] and len(match.group(1)) >= len(marker):
                fences.append(Fence(start=start, end=number, marker=marker))
                open_fence = None

    if open_fence is not None:
        fences.append(Fence(start=open_fence[0], end=None, marker=open_fence[1]))
    return fences


def normalize_target(target: str) -> str | None:
    """Strip a link target down to a local file path.

    Returns None for targets that don't name a local file: URLs,
    ``mailto:`` links and pure in-page anchors.

    Examples:
        >>> normalize_target("references/api.md#routing")
        'references/api.md'
        >>> normalize_target("https://hono.dev") is None
        True
        >>> normalize_target("#usage") is None
        True
    """
    target = target.strip()
    if not target or target.startswith("#") or _SCHEME.match(target):
        return None
    target = target.split("#", 1)[0].split("?", 1)[0]
    target = unquote(target)
    return target or None


def _drop_quoted_mention(match: re.Match) -> str:
    # A whole "See x.md" inside a code span is an example, not a mention
    span = match.group(0)
    return "" if _PROSE_REF.search(span) else span


def extract_links(text: str) -> list[LinkRef]:
    """Extract local file references outside code.

    Markdown links and images are found anywhere outside fenced blocks and
    inline code spans. Prose mentions (``See anti-patterns.md``) are found
    too, including the common ``See `anti-patterns.md``` form.
    """
    fences = scan_fences(text)
    skip = set()
    for fence in fences:
        last = fence.end if fence.end is not None else len(text.splitlines())
        skip.update(range(fence.start, last + 1))

    refs: list[LinkRef] = []
    for number, line in enumerate(text.splitlines(), start=1):
        if number in skip:
            continue

        prose = _INLINE_CODE.sub(_drop_quoted_mention, line)
        for match in _PROSE_REF.finditer(prose):
            target = normalize_target(match.group(1))
            if target:
                refs.append(LinkRef(target=target, line=number, prose=True))

        without_code = _INLINE_CODE.sub("", line)
        for match in _MD_LINK.finditer(without_code):
            target = normalize_target(match.group(1))
            if target:
                refs.append(LinkRef(target=target, line=number, prose=False))

    return refs
