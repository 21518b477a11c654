"""Validation engine for ruleforge.

This module provides the two validation pipelines:
1. validate: runs an ordered rule list against one value
2. validate_target: runs validate once per declared field of a target

Both return a ValidationSuccess or a failure result; rule failures, rule
exceptions and unregistered rules never raise out of the pipelines.
"""

import asyncio
import logging
from collections.abc import Hashable, Mapping
from typing import Any

from ruleforge.config import EngineConfig
from ruleforge.validation.messages import MessageCatalog, MessageTranslator, rule_message_params
from ruleforge.validation.metadata import FieldMetadataStore, TargetOptions, default_store
from ruleforge.validation.outcome import Fail, Ok, invoke
from ruleforge.validation.registry import RuleNotFoundError, RuleRegistry, default_registry
from ruleforge.validation.results import ResultBuilder
from ruleforge.validation.rulespec import parse_rule_spec
from ruleforge.validation.types import (
    ErrorMessageBuilder,
    FieldRuleBinding,
    RuleFn,
    RuleInvocationContext,
    TargetValidationResult,
    ValidationError,
    ValueValidationResult,
)

logger = logging.getLogger(__name__)

INVALID_RULE_KEY = "validator.invalidRule"


class Validator:
    """Runs rule bindings against values and targets.

    The registry and metadata store are shared and only read here; all
    per-call state (timers, the error list, the resolved options) lives in
    the call itself, so concurrent calls do not interfere.

    Example:
        validator = Validator()
        result = await validator.validate("abc", "required|minLength[2]")
        if not result.success:
            print(result.error.message)
    """

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        store: FieldMetadataStore | None = None,
        translator: MessageTranslator | None = None,
    ):
        self.registry = registry if registry is not None else default_registry
        self.store = store if store is not None else default_store
        self.translator = translator if translator is not None else MessageCatalog.load()

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        registry: RuleRegistry | None = None,
        store: FieldMetadataStore | None = None,
    ) -> "Validator":
        """Create a validator whose messages follow the configured locale."""
        translator = MessageCatalog.load(config.locale, config.translations_paths)
        return cls(registry=registry, store=store, translator=translator)

    # =========================================================================
    # Value pipeline
    # =========================================================================

    async def validate(
        self,
        value: Any,
        rules: Any = None,
        *,
        context: Any = None,
        data: Mapping[str, Any] | None = None,
        field_name: str | None = None,
        translated_property_name: str | None = None,
        error_message_builder: ErrorMessageBuilder | None = None,
    ) -> ValueValidationResult:
        """Validate one value against a rule list.

        Args:
            value: The value to validate
            rules: Bindings or any rule spec accepted by parse_rule_spec
            context: Caller state forwarded to every rule invocation
            data: Sibling values, when the value belongs to a larger object
            field_name: Name of the field the value belongs to
            translated_property_name: Display label of that field
            error_message_builder: Post-processes the failure message

        Returns:
            ValidationSuccess carrying `value`, or ValidationFailure with the
            first failing rule
        """
        builder = ResultBuilder(context)
        bindings = parse_rule_spec(rules, field_name or "")
        error = await self._run_bindings(
            bindings,
            value,
            data=data,
            context=context,
            field_name=field_name,
            translated_property_name=translated_property_name,
            error_message_builder=error_message_builder,
        )
        if error is None:
            return builder.success(value)
        return builder.failure(error)

    async def _run_bindings(
        self,
        bindings: list[FieldRuleBinding],
        value: Any,
        *,
        data: Mapping[str, Any] | None,
        context: Any,
        field_name: str | None,
        translated_property_name: str | None,
        error_message_builder: ErrorMessageBuilder | None,
    ) -> ValidationError | None:
        """Run bindings in order and stop at the first failure."""
        for binding in bindings:
            rule_params = list(binding.params)
            predicate = self._resolve(binding)
            if predicate is None:
                outcome: Ok | Fail = Fail(INVALID_RULE_KEY)
            else:
                ctx = RuleInvocationContext(
                    value=value,
                    rule_name=binding.rule_name,
                    raw_rule_name=binding.raw_rule_name or binding.rule_name,
                    rule_params=rule_params,
                    data=data,
                    context=context,
                    field_name=field_name,
                    translated_property_name=translated_property_name,
                )
                outcome = await invoke(predicate, ctx)

            if isinstance(outcome, Fail):
                message = self._build_message(
                    outcome.message,
                    binding,
                    value,
                    field_name,
                    translated_property_name,
                    error_message_builder,
                )
                return ValidationError(
                    property_name=field_name or "",
                    rule_name=binding.rule_name,
                    message=message,
                    value=value,
                    raw_rule_name=binding.raw_rule_name or binding.rule_name,
                    rule_params=binding.params,
                    translated_property_name=translated_property_name,
                )
        return None

    def _resolve(self, binding: FieldRuleBinding) -> RuleFn | None:
        if binding.is_inline:
            return binding.rule  # type: ignore[return-value]
        try:
            return self.registry.resolve(binding.rule_name).predicate
        except RuleNotFoundError as exc:
            logger.warning("%s (raw rule: '%s')", exc, binding.raw_rule_name)
            return None

    def _build_message(
        self,
        raw_message: str,
        binding: FieldRuleBinding,
        value: Any,
        field_name: str | None,
        translated_property_name: str | None,
        error_message_builder: ErrorMessageBuilder | None,
    ) -> str:
        params = rule_message_params(
            value,
            binding.rule_name,
            binding.raw_rule_name or binding.rule_name,
            binding.params,
            field_name=field_name,
            translated_property_name=translated_property_name,
        )
        message = self.translator.translate(raw_message, params)
        if error_message_builder is not None:
            message = error_message_builder(translated_property_name or field_name or "", message)
        return message

    # =========================================================================
    # Target pipeline
    # =========================================================================

    async def validate_target(
        self,
        target: Hashable,
        data: Mapping[str, Any] | None,
        *,
        context: Any = None,
        error_message_builder: ErrorMessageBuilder | None = None,
    ) -> TargetValidationResult:
        """Validate every declared field of a target against `data`.

        Fields are validated concurrently and independently; every failing
        field contributes one error, in field-declaration order. Fields not
        declared on the target are passed through untouched.

        Args:
            target: Target identity the rules were declared on
            data: The object to validate (None is treated as empty)
            context: Caller state forwarded to every rule invocation
            error_message_builder: Overrides the target's default builder

        Returns:
            ValidationSuccess carrying `data`, or TargetValidationFailure
        """
        builder = ResultBuilder(context)
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise TypeError(f"validate_target expects a mapping, got {type(data).__name__}")

        bindings_by_field = self.store.get_bindings(target)
        if not bindings_by_field:
            return builder.success(data)

        options = self.store.get_target_options(target).merged_with(
            TargetOptions(error_message_builder=error_message_builder)
        )
        labels = self.store.get_property_labels(target)

        tasks = [
            asyncio.ensure_future(
                self._run_bindings(
                    bindings,
                    data.get(field_name),
                    data=data,
                    context=context,
                    field_name=field_name,
                    translated_property_name=labels.get(field_name),
                    error_message_builder=options.error_message_builder,
                )
            )
            for field_name, bindings in bindings_by_field.items()
        ]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # No field of this call may outlive it.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        errors = [error for error in results if error is not None]
        if not errors:
            return builder.success(data)
        return builder.target_failure(errors)


# =============================================================================
# Module-level API
# =============================================================================

_default_validator: Validator | None = None


def get_default_validator() -> Validator:
    """Validator bound to the process-wide registry and store."""
    global _default_validator
    if _default_validator is None:
        _default_validator = Validator()
    return _default_validator


def set_default_validator(validator: Validator | None) -> None:
    """Replace (or with None, reset) the validator used by the module-level API."""
    global _default_validator
    _default_validator = validator


async def validate(value: Any, rules: Any = None, **options: Any) -> ValueValidationResult:
    """Validate a value with the default validator. See Validator.validate."""
    return await get_default_validator().validate(value, rules, **options)


async def validate_target(
    target: Hashable,
    data: Mapping[str, Any] | None,
    **options: Any,
) -> TargetValidationResult:
    """Validate a target with the default validator. See Validator.validate_target."""
    return await get_default_validator().validate_target(target, data, **options)
