"""Normalization of rule outcomes.

A rule signals success by returning the literal ``True``. Returned strings,
other values and raised exceptions are all folded into ``Fail`` before the
result builder sees them.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Union

from ruleforge.validation.types import RuleFn, RuleInvocationContext

logger = logging.getLogger(__name__)

# Catalog key used when a rule fails without saying why (False, None, "").
INVALID_MESSAGE_KEY = "validator.invalidMessage"


@dataclass(frozen=True)
class Ok:
    """The rule passed."""


@dataclass(frozen=True)
class Fail:
    """The rule failed with a raw message (plain text or a catalog key)."""

    message: str


Outcome = Union[Ok, Fail]

OK = Ok()


def normalize(result: Any) -> Outcome:
    """Map a rule's return value to Ok or Fail."""
    if result is True:
        return OK
    if isinstance(result, str):
        return Fail(result) if result else Fail(INVALID_MESSAGE_KEY)
    if result is False or result is None:
        return Fail(INVALID_MESSAGE_KEY)
    return Fail(str(result))


def exception_message(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


async def invoke(predicate: RuleFn, ctx: RuleInvocationContext) -> Outcome:
    """Invoke a rule, awaiting it if needed, and normalize the outcome.

    Synchronous raises and asynchronous rejections both become Fail.
    Cancellation is not intercepted.
    """
    try:
        result = predicate(ctx)
        if inspect.isawaitable(result):
            result = await result
    except Exception as exc:
        logger.debug("Rule '%s' raised %r", ctx.rule_name, exc, exc_info=True)
        return Fail(exception_message(exc))
    return normalize(result)
