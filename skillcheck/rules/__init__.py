"""Lint rules for skill corpora.

- Rule, Diagnostic, Severity, Scope: rule and finding types
- SkillUnit, LintContext: what rules inspect
- register_rule / get_rule / get_all_rules: the rule registry
"""

from skillcheck.rules.base import (
    Diagnostic,
    LintContext,
    Rule,
    Scope,
    Severity,
    SkillUnit,
)
from skillcheck.rules.registry import (
    get_all_rules,
    get_rule,
    register_rule,
)

__all__ = [
    "Diagnostic",
    "LintContext",
    "Rule",
    "Scope",
    "Severity",
    "SkillUnit",
    "get_all_rules",
    "get_rule",
    "register_rule",
]
