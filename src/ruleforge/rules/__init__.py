"""Built-in rules for ruleforge."""

from ruleforge.rules.builtins import BUILTIN_RULES, register_builtin_rules

__all__ = [
    "BUILTIN_RULES",
    "register_builtin_rules",
]
