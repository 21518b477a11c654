"""ruleforge validation engine.

Usage:
    from ruleforge.validation import Validator, declare_rules
    from ruleforge.rules import register_builtin_rules

    # At application startup
    register_builtin_rules()

    @declare_rules(name="required|minLength[2]")
    class User:
        name: str

    result = await Validator().validate_target(User, {"name": "John"})
"""

from ruleforge.validation.engine import (
    Validator,
    get_default_validator,
    set_default_validator,
    validate,
    validate_target,
)
from ruleforge.validation.messages import MessageCatalog, MessageTranslator
from ruleforge.validation.metadata import (
    FieldMetadataStore,
    TargetOptions,
    declare_rules,
    default_store,
    target_options,
)
from ruleforge.validation.registry import (
    RuleNotFoundError,
    RuleRegistry,
    default_registry,
    rule,
)
from ruleforge.validation.results import ResultBuilder
from ruleforge.validation.rulespec import parse_rule_spec
from ruleforge.validation.types import (
    ErrorMessageBuilder,
    FieldRuleBinding,
    RuleDefinition,
    RuleFn,
    RuleforgeError,
    RuleInvocationContext,
    TargetValidationFailure,
    TargetValidationResult,
    ValidationError,
    ValidationFailure,
    ValidationSuccess,
    ValueValidationResult,
)

__all__ = [
    # Types
    "ErrorMessageBuilder",
    "FieldRuleBinding",
    "RuleDefinition",
    "RuleFn",
    "RuleforgeError",
    "RuleInvocationContext",
    "TargetValidationFailure",
    "TargetValidationResult",
    "ValidationError",
    "ValidationFailure",
    "ValidationSuccess",
    "ValueValidationResult",
    # Registry
    "RuleNotFoundError",
    "RuleRegistry",
    "default_registry",
    "rule",
    # Metadata
    "FieldMetadataStore",
    "TargetOptions",
    "declare_rules",
    "default_store",
    "parse_rule_spec",
    "target_options",
    # Engine
    "MessageCatalog",
    "MessageTranslator",
    "ResultBuilder",
    "Validator",
    "get_default_validator",
    "set_default_validator",
    "validate",
    "validate_target",
]
