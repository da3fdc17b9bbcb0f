"""Built-in lint rules.

The registry calls register_builtin_rules() the first time it is read.
"""

from skillcheck.rules.base import Rule
from skillcheck.rules.documents import DOCUMENT_RULES
from skillcheck.rules.metadata import METADATA_RULES

BUILTIN_RULES: tuple[Rule, ...] = METADATA_RULES + DOCUMENT_RULES


def register_builtin_rules() -> None:
    """Register all built-in rules."""
    from skillcheck.rules.registry import register_rule
    for rule in BUILTIN_RULES:
        register_rule(rule)
