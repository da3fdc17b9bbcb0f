"""Centralized constants for the skillcheck package."""

# File that marks a directory as a skill
SKILL_MARKER = "SKILL.md"

# Subdirectory holding a skill's deeper reference documents
REFERENCES_SUBDIR = "references"

# Corpus configuration file
CONFIG_FILENAME = "skillcheck.toml"

# Default destination for vendored skills, relative to the corpus root
DEFAULT_VENDOR_DIR = "vendor"

# Front matter delimiters
FRONTMATTER_DELIMITER = "---"
FRONTMATTER_END_ALT = "..."

# Tools a host agent may be allowed to use from within a skill
KNOWN_TOOLS = ("Read", "Edit", "Write", "Grep", "Glob", "Bash", "Task")

# Front matter fields understood by skillcheck
RECOGNIZED_FIELDS = (
    "name",
    "description",
    "skill_version",
    "updated_at",
    "tags",
    "progressive_disclosure",
    "context_limit",
    "user-invocable",
    "disable-model-invocation",
    "allowed-tools",
    "argument-hint",
)

ENTRY_POINT_FIELDS = ("summary", "when_to_use", "quick_start")

# Rough characters-per-token ratio used for context budgets
CHARS_PER_TOKEN = 4
