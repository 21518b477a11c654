"""Built-in rules shipped with ruleforge.

Rules return True on success or a catalog key describing the failure.
Every rule except `required` passes on empty values, so optional fields
only need `required` when presence matters.

Available rules:
- required, nonNullString
- number, numberLessThan, numberLessThanOrEquals, numberGreaterThan,
  numberGreaterThanOrEquals, numberEquals
- minLength, maxLength, length
- email, url
- sameAs: compare against a sibling field
"""

import math
import operator
import re
from collections.abc import Callable
from typing import Any

from ruleforge.validation.registry import RuleRegistry, default_registry
from ruleforge.validation.types import RuleInvocationContext

# =============================================================================
# Format Patterns
# =============================================================================

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

URL_PATTERN = re.compile(
    r"^https?://[^\s/$.?#].[^\s]*$",
    re.IGNORECASE
)

INVALID_PARAMS = "validator.invalidRuleParams"


# =============================================================================
# Helpers
# =============================================================================


def is_empty(value: Any) -> bool:
    """Check if a value is considered empty."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, tuple, dict, set)) and len(value) == 0:
        return True
    return False


def to_number(value: Any) -> float:
    """Coerce numbers and numeric strings to float; NaN otherwise."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def to_int(value: Any) -> int | None:
    number = to_number(value)
    if math.isnan(number) or not number.is_integer() or number < 0:
        return None
    return int(number)


# =============================================================================
# Presence
# =============================================================================


def required(ctx: RuleInvocationContext) -> bool | str:
    return True if not is_empty(ctx.value) else "validator.required"


def non_null_string(ctx: RuleInvocationContext) -> bool | str:
    if ctx.value is None:
        return True
    if isinstance(ctx.value, str) and ctx.value.strip():
        return True
    return "validator.nonNullString"


# =============================================================================
# Numbers
# =============================================================================


def number(ctx: RuleInvocationContext) -> bool | str:
    if is_empty(ctx.value):
        return True
    return True if not math.isnan(to_number(ctx.value)) else "validator.number"


def _compare_number(
    compare: Callable[[float, float], bool],
    message_key: str,
) -> Callable[[RuleInvocationContext], bool | str]:
    """Build a rule comparing the value against the first rule param."""

    def rule(ctx: RuleInvocationContext) -> bool | str:
        if is_empty(ctx.value):
            return True
        if not ctx.rule_params:
            return INVALID_PARAMS
        to_compare = to_number(ctx.rule_params[0])
        if math.isnan(to_compare):
            return INVALID_PARAMS
        value = to_number(ctx.value)
        if math.isnan(value):
            return message_key
        return True if compare(value, to_compare) else message_key

    rule.__name__ = message_key.rsplit(".", 1)[-1]
    return rule


number_less_than = _compare_number(operator.lt, "validator.numberLessThan")
number_less_than_or_equals = _compare_number(operator.le, "validator.numberLessThanOrEquals")
number_greater_than = _compare_number(operator.gt, "validator.numberGreaterThan")
number_greater_than_or_equals = _compare_number(operator.ge, "validator.numberGreaterThanOrEquals")
number_equals = _compare_number(operator.eq, "validator.numberEquals")


# =============================================================================
# Lengths
# =============================================================================


def _length_of(value: Any) -> int:
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value)
    return len(str(value))


def min_length(ctx: RuleInvocationContext) -> bool | str:
    if is_empty(ctx.value):
        return True
    limit = to_int(ctx.rule_params[0]) if ctx.rule_params else None
    if limit is None:
        return INVALID_PARAMS
    return True if _length_of(ctx.value) >= limit else "validator.minLength"


def max_length(ctx: RuleInvocationContext) -> bool | str:
    if is_empty(ctx.value):
        return True
    limit = to_int(ctx.rule_params[0]) if ctx.rule_params else None
    if limit is None:
        return INVALID_PARAMS
    return True if _length_of(ctx.value) <= limit else "validator.maxLength"


def length(ctx: RuleInvocationContext) -> bool | str:
    """length[n] requires exactly n; length[min, max] requires a range."""
    if is_empty(ctx.value):
        return True
    bounds = [to_int(p) for p in ctx.rule_params[:2]]
    if not bounds or any(b is None for b in bounds):
        return INVALID_PARAMS
    size = _length_of(ctx.value)
    if len(bounds) == 1:
        return True if size == bounds[0] else "validator.length"
    low, high = bounds
    return True if low <= size <= high else "validator.lengthRange"


# =============================================================================
# Formats
# =============================================================================


def email(ctx: RuleInvocationContext) -> bool | str:
    if is_empty(ctx.value):
        return True
    if isinstance(ctx.value, str) and EMAIL_PATTERN.match(ctx.value):
        return True
    return "validator.email"


def url(ctx: RuleInvocationContext) -> bool | str:
    if is_empty(ctx.value):
        return True
    if isinstance(ctx.value, str) and URL_PATTERN.match(ctx.value):
        return True
    return "validator.url"


# =============================================================================
# Sibling comparison
# =============================================================================


def same_as(ctx: RuleInvocationContext) -> bool | str:
    """sameAs[otherField]: the value must equal data[otherField]."""
    if not ctx.rule_params:
        return INVALID_PARAMS
    other = (ctx.data or {}).get(str(ctx.rule_params[0]))
    if is_empty(ctx.value) and is_empty(other):
        return True
    return True if ctx.value == other else "validator.sameAs"


# =============================================================================
# Registration
# =============================================================================

BUILTIN_RULES = {
    "required": required,
    "nonNullString": non_null_string,
    "number": number,
    "numberLessThan": number_less_than,
    "numberLessThanOrEquals": number_less_than_or_equals,
    "numberGreaterThan": number_greater_than,
    "numberGreaterThanOrEquals": number_greater_than_or_equals,
    "numberEquals": number_equals,
    "minLength": min_length,
    "maxLength": max_length,
    "length": length,
    "email": email,
    "url": url,
    "sameAs": same_as,
}


def register_builtin_rules(registry: RuleRegistry | None = None) -> None:
    """Register all built-in rules. Call once at application startup."""
    target = registry if registry is not None else default_registry
    for name, predicate in BUILTIN_RULES.items():
        target.register(name, predicate)
