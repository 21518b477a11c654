"""Message translation for validation errors.

Rules may fail with plain text or with a catalog key such as
``validator.numberLessThan``. The engine hands every failure message to a
translator once; keys known to the catalog are rendered with the rule's
parameters, anything else is returned verbatim.

Catalogs are YAML files named ``<locale>.yaml``:

    validator:
      required: "{field} is required"
      numberLessThan: "{field} must be less than {ruleParams}"
"""

import logging
import re
from pathlib import Path
from typing import Any, Protocol

import yaml

logger = logging.getLogger(__name__)

BUNDLED_TRANSLATIONS = Path(__file__).resolve().parent.parent / "translations"
DEFAULT_LOCALE = "en"


class MessageTranslator(Protocol):
    """Protocol for anything that renders validation messages."""

    def has(self, key: str) -> bool:
        ...

    def translate(self, key: str, params: dict[str, Any] | None = None) -> str:
        """Render `key` with `params`; unknown keys are returned unchanged."""
        ...


def _flatten(data: dict[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in data.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(_flatten(value, dotted))
        elif value is not None:
            flat[dotted] = str(value)
    return flat


def _format_param(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(_format_param(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class MessageCatalog:
    """Translator backed by flattened YAML message catalogs.

    Supports ``{name}`` placeholders; a placeholder with no matching
    parameter renders as an empty string.
    """

    PATTERN = re.compile(r"\{(?P<name>\w+)\}")

    def __init__(self, messages: dict[str, str] | None = None, locale: str = DEFAULT_LOCALE):
        self.locale = locale
        self.messages: dict[str, str] = dict(messages or {})

    @classmethod
    def load(
        cls,
        locale: str = DEFAULT_LOCALE,
        extra_paths: list[Path] | None = None,
    ) -> "MessageCatalog":
        """Load the bundled catalog for `locale`, then overlay extra directories.

        Falls back to the default locale when the bundled catalog for `locale`
        does not exist.
        """
        catalog = cls(locale=locale)
        bundled = BUNDLED_TRANSLATIONS / f"{locale}.yaml"
        if not bundled.exists():
            logger.warning(
                "No bundled messages for locale '%s'; falling back to '%s'",
                locale,
                DEFAULT_LOCALE,
            )
            bundled = BUNDLED_TRANSLATIONS / f"{DEFAULT_LOCALE}.yaml"
        catalog.update_from_file(bundled)

        for directory in extra_paths or []:
            path = Path(directory) / f"{locale}.yaml"
            if path.exists():
                catalog.update_from_file(path)
            else:
                logger.warning("Translations file not found: %s", path)
        return catalog

    def update_from_file(self, path: Path) -> None:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Translations file {path} must contain a mapping")
        self.messages.update(_flatten(data))

    def has(self, key: str) -> bool:
        return key in self.messages

    def translate(self, key: str, params: dict[str, Any] | None = None) -> str:
        template = self.messages.get(key)
        if template is None:
            return key
        params = params or {}

        def replace(match: re.Match) -> str:
            return _format_param(params.get(match.group("name")))

        return self.PATTERN.sub(replace, template)


def rule_message_params(
    value: Any,
    rule_name: str,
    raw_rule_name: str,
    rule_params: list[Any] | tuple[Any, ...],
    field_name: str | None = None,
    translated_property_name: str | None = None,
) -> dict[str, Any]:
    """Build the parameter bag passed to the translator for a failing rule."""
    params: dict[str, Any] = {
        "value": value,
        "rule": rule_name,
        "rawRule": raw_rule_name,
        "ruleParams": list(rule_params),
        "fieldName": field_name or "",
        "field": translated_property_name or field_name or "value",
    }
    for index, param in enumerate(rule_params):
        params[f"param{index}"] = param
    return params
