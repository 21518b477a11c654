"""Core types for the ruleforge validation engine.

This module defines the value objects shared by every part of the engine:
- RuleInvocationContext: what a rule receives on each invocation
- FieldRuleBinding: a rule bound to a field of a target, in declaration order
- ValidationError: one failure reported for a field or a value
- ValidationSuccess / ValidationFailure / TargetValidationFailure: results
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union


class RuleforgeError(Exception):
    """Base class for errors raised by ruleforge itself."""


@dataclass(frozen=True)
class RuleInvocationContext:
    """Input handed to a rule predicate.

    Attributes:
        value: The value being validated
        rule_name: Registered name of the rule (or the function name for inline rules)
        raw_rule_name: The rule as it was declared (e.g., "minLength[2]")
        rule_params: Parameters declared with the binding, forwarded verbatim
        data: The whole object being validated, for rules that compare siblings
        context: Caller-supplied state, passed through untouched
        field_name: Field being validated, or None for ad-hoc values
        translated_property_name: Display label of the field, if any
    """

    value: Any
    rule_name: str
    raw_rule_name: str
    rule_params: list[Any] = field(default_factory=list)
    data: Mapping[str, Any] | None = None
    context: Any = None
    field_name: str | None = None
    translated_property_name: str | None = None


# A rule returns True (or an awaitable of True) to pass; see outcome.py.
RuleFn = Callable[[RuleInvocationContext], Any]

# (field name or label, raw message) -> final message
ErrorMessageBuilder = Callable[[str, str], str]


@dataclass(frozen=True)
class RuleDefinition:
    """A named rule predicate held by the registry."""

    name: str
    predicate: RuleFn


@dataclass(frozen=True)
class FieldRuleBinding:
    """A rule bound to a field, with its parameters.

    Attributes:
        field_name: Field the rule applies to ("" for ad-hoc value validation)
        rule: Registered rule name, or a rule function invoked directly
        params: Parameters forwarded to every invocation
        order: Assignment sequence; bindings run in ascending order
        raw_rule_name: Declared form of the rule, used in messages
    """

    field_name: str
    rule: str | RuleFn
    params: tuple[Any, ...] = ()
    order: int = 0
    raw_rule_name: str = ""

    @property
    def rule_name(self) -> str:
        if isinstance(self.rule, str):
            return self.rule
        return getattr(self.rule, "__name__", "anonymous")

    @property
    def is_inline(self) -> bool:
        return not isinstance(self.rule, str)


@dataclass(frozen=True)
class ValidationError:
    """A single validation failure.

    Attributes:
        property_name: Field that failed ("" for ad-hoc values)
        rule_name: Name of the first failing rule
        message: Human-readable message
        value: The value that failed
        raw_rule_name: The rule as declared (e.g., "numberLessThan[10]")
        rule_params: Parameters of the failing binding
        translated_property_name: Display label of the field, if any
    """

    property_name: str
    rule_name: str
    message: str
    value: Any = None
    raw_rule_name: str = ""
    rule_params: tuple[Any, ...] = ()
    translated_property_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "propertyName": self.property_name,
            "translatedPropertyName": self.translated_property_name,
            "ruleName": self.rule_name,
            "rawRuleName": self.raw_rule_name,
            "ruleParams": list(self.rule_params),
            "message": self.message,
            "value": self.value,
        }


@dataclass(frozen=True)
class ValidationSuccess:
    """Validation passed; `data` is the validated input, unchanged."""

    data: Any
    validated_at: datetime
    duration: float
    context: Any = None
    success: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "data": self.data,
            "validatedAt": self.validated_at.isoformat(),
            "duration": self.duration,
        }


@dataclass(frozen=True)
class ValidationFailure:
    """A single value failed; `error` describes the first failing rule."""

    error: ValidationError
    failed_at: datetime
    duration: float
    context: Any = None
    success: bool = field(default=False, init=False)

    @property
    def message(self) -> str:
        return self.error.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": self.error.to_dict(),
            "failedAt": self.failed_at.isoformat(),
            "duration": self.duration,
        }


@dataclass(frozen=True)
class TargetValidationFailure:
    """One or more fields of a target failed, one error per failing field."""

    errors: tuple[ValidationError, ...]
    failed_at: datetime
    duration: float
    context: Any = None
    success: bool = field(default=False, init=False)

    @property
    def failure_count(self) -> int:
        return len(self.errors)

    @property
    def message(self) -> str:
        noun = "field" if self.failure_count == 1 else "fields"
        return f"Validation failed for {self.failure_count} {noun}"

    def errors_by_field(self) -> dict[str, str]:
        return {e.property_name: e.message for e in self.errors}

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "message": self.message,
            "failureCount": self.failure_count,
            "errors": [e.to_dict() for e in self.errors],
            "failedAt": self.failed_at.isoformat(),
            "duration": self.duration,
        }


ValueValidationResult = Union[ValidationSuccess, ValidationFailure]
TargetValidationResult = Union[ValidationSuccess, TargetValidationFailure]
