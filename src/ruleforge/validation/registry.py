"""Rule registry for ruleforge.

Provides registration and lookup of named rule predicates. The registry is
written at application startup and only read while validating.
"""

import logging
import threading
from collections.abc import Callable

from ruleforge.validation.types import RuleDefinition, RuleFn, RuleforgeError

logger = logging.getLogger(__name__)


class RuleNotFoundError(RuleforgeError, LookupError):
    """Raised when a binding references a rule name that was never registered."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        message = (
            f"Rule '{name}' is not registered. "
            "Rules must be explicitly registered at application startup."
        )
        if available:
            message += " Available rules: " + ", ".join(available)
        super().__init__(message)


class RuleRegistry:
    """Registry mapping rule names to predicates.

    Rules must be registered before any validation references them by name.
    Re-registering a name replaces the previous predicate (last registration
    wins). Writes take a lock so registration is safe on threaded hosts;
    lookups are plain dict reads.

    Example:
        registry = RuleRegistry()
        registry.register("isEven", lambda ctx: ctx.value % 2 == 0 or "Must be even")

        definition = registry.resolve("isEven")
    """

    def __init__(self) -> None:
        self._rules: dict[str, RuleDefinition] = {}
        self._lock = threading.Lock()

    def register(self, name: str, predicate: RuleFn) -> None:
        """Register a rule predicate by name.

        Args:
            name: Unique identifier for the rule (e.g., "required", "myapp.isEven")
            predicate: Callable receiving a RuleInvocationContext

        Raises:
            ValueError: If the name is empty
            TypeError: If the predicate is not callable
        """
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Rule name must be a non-empty string")
        if not callable(predicate):
            raise TypeError(f"Rule '{name}' predicate must be callable")

        name = name.strip()
        with self._lock:
            previous = self._rules.get(name)
            if previous is not None and previous.predicate is not predicate:
                logger.warning("Rule '%s' is already registered; replacing it", name)
            self._rules = {**self._rules, name: RuleDefinition(name, predicate)}

    def resolve(self, name: str) -> RuleDefinition:
        """Get a registered rule by name.

        Raises:
            RuleNotFoundError: If the rule is not registered
        """
        definition = self._rules.get(name)
        if definition is None:
            raise RuleNotFoundError(name)
        return definition

    def get(self, name: str) -> RuleFn | None:
        """Get a rule predicate by name, or None."""
        definition = self._rules.get(name)
        return definition.predicate if definition else None

    def is_registered(self, name: str) -> bool:
        return name in self._rules

    def list_registered(self) -> list[str]:
        """List all registered rule names."""
        return sorted(self._rules)

    def clear(self) -> None:
        """Clear all registrations. Primarily for testing."""
        with self._lock:
            self._rules = {}

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules


# Process-wide registry used by the module-level API.
default_registry = RuleRegistry()


def rule(name: str, registry: RuleRegistry | None = None) -> Callable[[RuleFn], RuleFn]:
    """Decorator to register a rule function.

    Usage:
        @rule("isEven")
        def is_even(ctx: RuleInvocationContext):
            return ctx.value % 2 == 0 or "The number must be even."
    """

    def decorator(fn: RuleFn) -> RuleFn:
        target = registry if registry is not None else default_registry
        target.register(name, fn)
        return fn

    return decorator
