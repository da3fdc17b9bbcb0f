"""Lint rules by id.

The built-in rules are added the first time the registry is read. Corpora
can register extra rules next to them with register_rule().
"""

import threading

from skillcheck.rules.base import Rule

_lock = threading.Lock()
_rules: dict[str, Rule] = {}
_builtins_loaded = False
_builtins_disabled = False


def _load_builtins() -> None:
    global _builtins_loaded
    with _lock:
        if _builtins_loaded or _builtins_disabled:
            return
        _builtins_loaded = True

    # Deferred: the rule modules import the skillcheck.rules package
    from skillcheck.rules.builtin import register_builtin_rules
    register_builtin_rules()


def register_rule(rule: Rule) -> None:
    """Add a rule, replacing any earlier rule with the same id."""
    with _lock:
        _rules[rule.id] = rule


def get_rule(rule_id: str) -> Rule | None:
    """Look up a rule by id, or None if nothing is registered under it."""
    _load_builtins()
    with _lock:
        return _rules.get(rule_id)


def get_all_rules() -> dict[str, Rule]:
    """All registered rules keyed by id, in registration order."""
    _load_builtins()
    with _lock:
        return dict(_rules)


def clear_registry(*, suppress_auto_registration: bool = True) -> None:
    """Remove every rule.

    Args:
        suppress_auto_registration: Keep the built-in rules from coming back
            on the next read. Pass False to have them reloaded.
    """
    global _builtins_loaded, _builtins_disabled
    with _lock:
        _rules.clear()
        _builtins_loaded = False
        _builtins_disabled = suppress_auto_registration


RegistryState = tuple[dict[str, Rule], bool, bool]


def get_registry_snapshot() -> RegistryState:
    """Capture the registry so a test can put it back afterwards."""
    with _lock:
        return dict(_rules), _builtins_loaded, _builtins_disabled


def restore_registry_snapshot(snapshot: RegistryState) -> None:
    """Put back a state captured by get_registry_snapshot()."""
    global _builtins_loaded, _builtins_disabled
    with _lock:
        _rules.clear()
        _rules.update(snapshot[0])
        _builtins_loaded, _builtins_disabled = snapshot[1], snapshot[2]
