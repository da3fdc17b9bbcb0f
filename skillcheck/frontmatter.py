"""YAML front matter parsing and in-place updates for markdown documents.

A document with front matter looks like::

    ---
    name: code-audit
    description: Audit a codebase against the house checklist
    ---

    # Body

The block must start on the very first line. It ends at the next line that
is exactly ``---`` (or the YAML document-end marker ``...``).
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from skillcheck.constants import FRONTMATTER_DELIMITER, FRONTMATTER_END_ALT
from skillcheck.exceptions import FrontmatterError

logger = logging.getLogger(__name__)

_TOP_LEVEL_KEY = re.compile(r"^([A-Za-z0-9_][A-Za-z0-9_-]*)\s*:")


@dataclass
class ParsedDocument:
    """A markdown document split into front matter and body.

    Attributes:
        frontmatter: Parsed YAML mapping, or None when the document has no block
        body: Markdown after the closing delimiter
        body_start_line: 1-based file line number of the first body line
        raw_frontmatter: The YAML text between the delimiters
    """

    frontmatter: dict[str, Any] | None
    body: str
    body_start_line: int = 1
    raw_frontmatter: str = ""
    path: Path | None = field(default=None, compare=False)

    @property
    def has_frontmatter(self) -> bool:
        return self.frontmatter is not None


def _strip_bom(text: str) -> str:
    return text[1:] if text.startswith("\ufeff") else text


def split_frontmatter(text: str) -> tuple[str | None, str, int]:
    """Split raw document text into its front matter block and body.

    Args:
        text: Full document text

    Returns:
        Tuple of (frontmatter_text, body, body_start_line). frontmatter_text is
        None when the document does not open with a delimiter line.

    Raises:
        FrontmatterError: If an opening delimiter has no matching close

    Examples:
        >>> split_frontmatter("---\\nname: x\\n---\\nbody\\n")
        ('name: x\\n', 'body\\n', 4)
        >>> split_frontmatter("# Title\\n")
        (None, '# Title\\n', 1)
    """
    text = _strip_bom(text)
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return None, text, 1

    for index in range(1, len(lines)):
        if lines[index].rstrip() in (FRONTMATTER_DELIMITER, FRONTMATTER_END_ALT):
            frontmatter = "".join(lines[1:index])
            body = "".join(lines[index + 1:])
            return frontmatter, body, index + 2

    raise FrontmatterError("front matter has no closing '---' line", line=1)


class FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps impossible dates (``2025-13-45``) as strings.

    PyYAML raises a bare ValueError for them, while the updated-at rule
    wants to report them like any other bad timestamp.
    """

    def construct_yaml_timestamp(self, node):
        try:
            return super().construct_yaml_timestamp(node)
        except ValueError:
            return self.construct_scalar(node)


FrontmatterLoader.add_constructor(
    "tag:yaml.org,2002:timestamp", FrontmatterLoader.construct_yaml_timestamp
)


def _failing_key_line(frontmatter: str) -> int | None:
    """File line of the top-level key whose value can't be constructed."""
    loader = FrontmatterLoader(frontmatter)
    try:
        node = loader.get_single_node()
        if not isinstance(node, yaml.MappingNode):
            return None
        for key_node, value_node in node.value:
            try:
                loader.construct_object(value_node, deep=True)
            except (ValueError, TypeError):
                return key_node.start_mark.line + 2
        return None
    finally:
        loader.dispose()


def load_yaml_mapping(frontmatter: str) -> dict[str, Any]:
    """Parse front matter YAML into a mapping.

    Args:
        frontmatter: YAML text without delimiters

    Returns:
        The parsed mapping ({} for an empty block)

    Raises:
        FrontmatterError: On YAML syntax errors, values YAML can't construct
            (``!!int abc``), or a non-mapping document
    """
    try:
        data = yaml.load(frontmatter, Loader=FrontmatterLoader)
    except (ValueError, TypeError) as e:
        raise FrontmatterError(
            f"invalid value in front matter: {e}", line=_failing_key_line(frontmatter)
        ) from e
    except yaml.YAMLError as e:
        line = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            # +2: the opening delimiter is file line 1 and marks are 0-based
            line = mark.line + 2
        problem = getattr(e, "problem", None) or str(e)
        raise FrontmatterError(f"invalid YAML in front matter: {problem}", line=line) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"front matter must be a mapping, got {type(data).__name__}", line=2
        )
    return data


def parse_frontmatter(text: str) -> ParsedDocument:
    """Parse a document's text into front matter and body.

    Args:
        text: Full document text

    Returns:
        ParsedDocument; frontmatter is None if the document has no block

    Raises:
        FrontmatterError: If the block is unterminated, invalid YAML, or not a mapping
    """
    raw, body, body_start = split_frontmatter(text)
    if raw is None:
        return ParsedDocument(frontmatter=None, body=body, body_start_line=body_start)
    return ParsedDocument(
        frontmatter=load_yaml_mapping(raw),
        body=body,
        body_start_line=body_start,
        raw_frontmatter=raw,
    )


def read_document(path: Path) -> ParsedDocument:
    """Read and parse a markdown document from disk.

    Args:
        path: Path to the markdown file

    Returns:
        ParsedDocument with ``path`` set
    """
    logger.debug("Reading %s", path)
    document = parse_frontmatter(path.read_text(encoding="utf-8"))
    document.path = path
    return document


def _dump_field(key: str, value: Any) -> list[str]:
    dumped = yaml.safe_dump(
        {key: value}, default_flow_style=False, sort_keys=False, allow_unicode=True
    )
    return dumped.rstrip("\n").split("\n")


def update_frontmatter(path: Path, updates: dict[str, Any]) -> None:
    """Update top-level front matter fields in place.

    Existing keys are rewritten where they stand (including any indented
    continuation lines of their old value); new keys are appended to the end
    of the block. The body is left untouched.

    Args:
        path: Path to the markdown file
        updates: Mapping of field name to new value

    Raises:
        FileNotFoundError: If the file doesn't exist
        FrontmatterError: If the existing block is unterminated
    """
    content = path.read_text(encoding="utf-8")
    raw, body, _ = split_frontmatter(content)

    if raw is None:
        # No front matter yet, add a block holding only the updates
        new_lines: list[str] = []
        for key, value in updates.items():
            new_lines.extend(_dump_field(key, value))
        block = "\n".join(new_lines)
        path.write_text(f"{FRONTMATTER_DELIMITER}\n{block}\n{FRONTMATTER_DELIMITER}\n\n{content}", encoding="utf-8")
        return

    pending = dict(updates)
    result: list[str] = []
    skipping = False
    for line in raw.splitlines():
        match = _TOP_LEVEL_KEY.match(line)
        if match and match.group(1) in pending:
            key = match.group(1)
            result.extend(_dump_field(key, pending.pop(key)))
            skipping = True
            continue
        if skipping and (line.startswith((" ", "\t", "-")) or not line.strip()):
            # Continuation of the value being replaced
            continue
        skipping = False
        result.append(line)

    for key, value in pending.items():
        result.extend(_dump_field(key, value))

    block = "\n".join(result)
    path.write_text(f"{FRONTMATTER_DELIMITER}\n{block}\n{FRONTMATTER_DELIMITER}\n{body}", encoding="utf-8")
    logger.debug("Updated front matter fields %s in %s", sorted(updates), path)
