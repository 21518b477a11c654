"""Result construction for both validation pipelines."""

import time
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from ruleforge.validation.types import (
    TargetValidationFailure,
    ValidationError,
    ValidationFailure,
    ValidationSuccess,
)


class ResultBuilder:
    """Builds the success/failure result of one pipeline call.

    One builder is created per call; it starts timing on construction so the
    reported duration covers every rule invocation made by that call.
    """

    def __init__(self, context: Any = None):
        self.context = context
        self._started = time.perf_counter()

    def elapsed_ms(self) -> float:
        return max(0.0, (time.perf_counter() - self._started) * 1000.0)

    def success(self, data: Any) -> ValidationSuccess:
        return ValidationSuccess(
            data=data,
            validated_at=datetime.now(timezone.utc),
            duration=self.elapsed_ms(),
            context=self.context,
        )

    def failure(self, error: ValidationError) -> ValidationFailure:
        return ValidationFailure(
            error=error,
            failed_at=datetime.now(timezone.utc),
            duration=self.elapsed_ms(),
            context=self.context,
        )

    def target_failure(self, errors: Iterable[ValidationError]) -> TargetValidationFailure:
        errors = tuple(errors)
        if not errors:
            raise ValueError("A target failure needs at least one error")
        return TargetValidationFailure(
            errors=errors,
            failed_at=datetime.now(timezone.utc),
            duration=self.elapsed_ms(),
            context=self.context,
        )
