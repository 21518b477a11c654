"""Parsing of rule specifications into field bindings.

Accepted forms:
- "required|minLength[2]|maxLength[10]"
- ["required", "minLength[2]", some_rule_function]
- {"numberLessThan": [10], "required": True}  (False disables a rule)
- ("numberLessThan", [10])
- FieldRuleBinding instances
"""

from collections.abc import Mapping
from typing import Any

from ruleforge.validation.types import FieldRuleBinding

RULE_SEPARATOR = "|"


def parse_rule_token(token: str) -> tuple[str, tuple[str, ...]]:
    """Split "name[a, b]" into ("name", ("a", "b")).

    Params declared in a string are kept as strings; rules coerce them.
    """
    token = token.strip()
    if "[" not in token:
        return token, ()
    name, _, rest = token.partition("[")
    rest = rest.rstrip().rstrip("]")
    params = tuple(p.replace("]", "").strip() for p in rest.split(","))
    if params == ("",):
        params = ()
    return name.strip(), params


def _is_params(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def parse_rule_spec(spec: Any, field_name: str = "") -> list[FieldRuleBinding]:
    """Parse a rule spec into unordered bindings for one field.

    The returned bindings carry order 0; the metadata store assigns the
    declaration sequence when they are declared.

    Raises:
        TypeError: If an item of the spec has an unsupported type
    """
    if spec is None:
        return []

    if isinstance(spec, FieldRuleBinding):
        return [
            FieldRuleBinding(
                field_name=field_name,
                rule=spec.rule,
                params=spec.params,
                raw_rule_name=spec.raw_rule_name,
            )
        ]

    if isinstance(spec, str):
        bindings = []
        for token in spec.split(RULE_SEPARATOR):
            if not token.strip():
                continue
            name, params = parse_rule_token(token)
            bindings.append(
                FieldRuleBinding(
                    field_name=field_name,
                    rule=name,
                    params=params,
                    raw_rule_name=token.strip(),
                )
            )
        return bindings

    if callable(spec):
        name = getattr(spec, "__name__", "anonymous")
        return [FieldRuleBinding(field_name=field_name, rule=spec, raw_rule_name=name)]

    if isinstance(spec, Mapping):
        bindings = []
        for name, params in spec.items():
            if not isinstance(name, str):
                raise TypeError(f"Rule names must be strings, got {type(name).__name__}")
            if params is False:
                continue
            bindings.append(
                FieldRuleBinding(
                    field_name=field_name,
                    rule=name,
                    params=tuple(params) if _is_params(params) else (),
                    raw_rule_name=name,
                )
            )
        return bindings

    if (
        isinstance(spec, tuple)
        and len(spec) == 2
        and (isinstance(spec[0], str) or callable(spec[0]))
        and _is_params(spec[1])
    ):
        rule, params = spec
        if isinstance(rule, str):
            name, inline_params = parse_rule_token(rule)
            raw = rule.strip()
        else:
            name, inline_params = rule, ()
            raw = getattr(rule, "__name__", "anonymous")
        return [
            FieldRuleBinding(
                field_name=field_name,
                rule=name,
                params=inline_params + tuple(params),
                raw_rule_name=raw,
            )
        ]

    if isinstance(spec, (list, tuple)):
        bindings = []
        for item in spec:
            bindings.extend(parse_rule_spec(item, field_name))
        return bindings

    raise TypeError(f"Unsupported rule specification: {spec!r}")
