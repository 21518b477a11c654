"""Field metadata store for ruleforge.

Maps a target (a class, or any hashable key such as a name loaded from YAML)
to the ordered rule bindings declared on each of its fields, plus display
labels and target-level validation options.

Usage:
    @declare_rules(name="required|minLength[2]", age=[("numberLessThan", [150])])
    @target_options(labels={"name": "Full name"})
    class User:
        name: str
        age: int
"""

import itertools
import threading
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any

from ruleforge.validation.rulespec import parse_rule_spec
from ruleforge.validation.types import ErrorMessageBuilder, FieldRuleBinding, RuleFn


@dataclass(frozen=True)
class TargetOptions:
    """Target-level defaults for validate_target.

    Attributes:
        error_message_builder: Post-processes every failure message
    """

    error_message_builder: ErrorMessageBuilder | None = None

    def merged_with(self, other: "TargetOptions | None") -> "TargetOptions":
        """Return options where values set on `other` win."""
        if other is None:
            return self
        return TargetOptions(
            error_message_builder=other.error_message_builder or self.error_message_builder,
        )


@dataclass
class _TargetEntry:
    fields: dict[str, list[FieldRuleBinding]] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)
    options: TargetOptions | None = None


class FieldMetadataStore:
    """Store of per-field rule bindings keyed by target identity.

    Declaration order is preserved per field and determines execution order.
    Targets with no declarations have no bindings and validate anything.
    For class targets, bindings declared on base classes come first.
    """

    def __init__(self) -> None:
        self._targets: dict[Hashable, _TargetEntry] = {}
        self._sequence = itertools.count(1)
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Declaration
    # -------------------------------------------------------------------------

    def declare_field_rule(
        self,
        target: Hashable,
        field_name: str,
        rule: str | RuleFn,
        params: Any = (),
        raw_rule_name: str | None = None,
    ) -> FieldRuleBinding:
        """Append a rule binding to a field of a target.

        Args:
            target: Target identity (class or name)
            field_name: Field the rule applies to
            rule: Registered rule name or a rule function
            params: Parameters forwarded to every invocation; a single value
                that is not a list or tuple is wrapped as the only parameter
            raw_rule_name: Declared form of the rule; defaults to the rule name

        Returns:
            The new binding
        """
        if not field_name:
            raise ValueError("field_name must be a non-empty string")
        if not (isinstance(rule, str) and rule) and not callable(rule):
            raise TypeError(f"Rule for field '{field_name}' must be a name or a callable")

        if params is None:
            params = ()
        elif not isinstance(params, (list, tuple)):
            params = (params,)

        if raw_rule_name is None:
            raw_rule_name = rule if isinstance(rule, str) else getattr(rule, "__name__", "anonymous")

        with self._lock:
            binding = FieldRuleBinding(
                field_name=field_name,
                rule=rule,
                params=tuple(params),
                order=next(self._sequence),
                raw_rule_name=raw_rule_name,
            )
            entry = self._targets.setdefault(target, _TargetEntry())
            entry.fields.setdefault(field_name, []).append(binding)
        return binding

    def declare(self, target: Hashable, field_name: str, spec: Any) -> list[FieldRuleBinding]:
        """Parse a rule spec and declare each resulting binding in order."""
        return [
            self.declare_field_rule(
                target,
                field_name,
                binding.rule,
                binding.params,
                raw_rule_name=binding.raw_rule_name,
            )
            for binding in parse_rule_spec(spec, field_name)
        ]

    def set_property_label(self, target: Hashable, field_name: str, label: str) -> None:
        """Set the display label used as the field's translated property name."""
        with self._lock:
            self._targets.setdefault(target, _TargetEntry()).labels[field_name] = label

    def set_target_options(self, target: Hashable, options: TargetOptions) -> None:
        with self._lock:
            self._targets.setdefault(target, _TargetEntry()).options = options

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def _lineage(self, target: Hashable) -> list[Hashable]:
        """Targets whose declarations apply, base classes first. Caller holds the lock."""
        if isinstance(target, type):
            return [t for t in reversed(target.__mro__) if t in self._targets]
        return [target] if target in self._targets else []

    def get_bindings(self, target: Hashable) -> dict[str, list[FieldRuleBinding]]:
        """Get all field bindings for a target.

        Returns:
            Dict of field_name -> bindings in declaration order. Empty if the
            target has no declared rules. The lists are copies.
        """
        result: dict[str, list[FieldRuleBinding]] = {}
        with self._lock:
            for key in self._lineage(target):
                for field_name, bindings in self._targets[key].fields.items():
                    result.setdefault(field_name, []).extend(bindings)
        return result

    def get_property_labels(self, target: Hashable) -> dict[str, str]:
        labels: dict[str, str] = {}
        with self._lock:
            for key in self._lineage(target):
                labels.update(self._targets[key].labels)
        return labels

    def get_target_options(self, target: Hashable) -> TargetOptions:
        options = TargetOptions()
        with self._lock:
            for key in self._lineage(target):
                options = options.merged_with(self._targets[key].options)
        return options

    def has_rules(self, target: Hashable) -> bool:
        with self._lock:
            return any(self._targets[key].fields for key in self._lineage(target))

    def list_targets(self) -> list[Hashable]:
        with self._lock:
            return list(self._targets)

    def clear(self, target: Hashable | None = None) -> None:
        """Clear declarations for one target, or all of them. Primarily for testing."""
        with self._lock:
            if target is None:
                self._targets.clear()
            else:
                self._targets.pop(target, None)


# Process-wide store used by the module-level API and the class decorators.
default_store = FieldMetadataStore()


def declare_rules(
    store: FieldMetadataStore | None = None,
    **field_specs: Any,
) -> Callable[[type], type]:
    """Class decorator declaring rule specs per field.

    Usage:
        @declare_rules(email="required|email", password=["required", "minLength[8]"])
        class SignupForm:
            ...
    """

    def decorator(cls: type) -> type:
        target_store = store if store is not None else default_store
        for field_name, spec in field_specs.items():
            target_store.declare(cls, field_name, spec)
        return cls

    return decorator


def target_options(
    error_message_builder: ErrorMessageBuilder | None = None,
    labels: dict[str, str] | None = None,
    store: FieldMetadataStore | None = None,
) -> Callable[[type], type]:
    """Class decorator setting target-level options and field labels."""

    def decorator(cls: type) -> type:
        target_store = store if store is not None else default_store
        target_store.set_target_options(
            cls, TargetOptions(error_message_builder=error_message_builder)
        )
        for field_name, label in (labels or {}).items():
            target_store.set_property_label(cls, field_name, label)
        return cls

    return decorator
