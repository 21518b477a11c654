"""Load target declarations from YAML files.

A target file declares the rules of one target:

    target: User
    options:
      errorFormat: "[{field}] : {message}"
    fields:
      - name: email
        label: Email address
        rules: [required, email]
      - name: age
        rules:
          - numberLessThan: [150]

Loaded targets are declared into a FieldMetadataStore keyed by the target
name, so `validate_target("User", data)` validates against them.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ruleforge.metadata.schema import validate_document
from ruleforge.validation.messages import MessageCatalog
from ruleforge.validation.metadata import FieldMetadataStore, TargetOptions, default_store
from ruleforge.validation.types import ErrorMessageBuilder, RuleforgeError

logger = logging.getLogger(__name__)


class TargetDefinitionError(RuleforgeError, ValueError):
    """Raised when a target declaration file is malformed."""


@dataclass
class FieldDeclaration:
    name: str
    label: str | None = None
    rules: Any = None


@dataclass
class TargetDefinition:
    name: str
    fields: list[FieldDeclaration] = field(default_factory=list)
    description: str = ""
    error_format: str | None = None
    source: Path | None = None

    def error_message_builder(self) -> ErrorMessageBuilder | None:
        """Builder rendering `errorFormat` with {field} and {message}."""
        if not self.error_format:
            return None
        fmt = self.error_format

        def build(field_name: str, message: str) -> str:
            values = {"field": field_name, "message": message}
            return MessageCatalog.PATTERN.sub(
                lambda match: values.get(match.group("name"), match.group(0)),
                fmt,
            )

        return build

    def declare(self, store: FieldMetadataStore | None = None) -> None:
        """Declare this target's rules, labels and options into a store."""
        store = store if store is not None else default_store
        store.clear(self.name)
        for field_decl in self.fields:
            store.declare(self.name, field_decl.name, field_decl.rules)
            if field_decl.label:
                store.set_property_label(self.name, field_decl.name, field_decl.label)
        builder = self.error_message_builder()
        if builder is not None:
            store.set_target_options(self.name, TargetOptions(error_message_builder=builder))


class TargetLoader:
    """Loads target definitions from a YAML file or a directory of them."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.targets: dict[str, TargetDefinition] = {}

    def load_all(self) -> dict[str, TargetDefinition]:
        """Load every target under the path.

        Raises:
            TargetDefinitionError: On schema violations or duplicate names
        """
        if self.path.is_dir():
            files = sorted(self.path.glob("*.yaml"))
        elif self.path.exists():
            files = [self.path]
        else:
            raise TargetDefinitionError(f"Target path not found: {self.path}")

        for yaml_file in files:
            definition = self.load_file(yaml_file)
            if definition.name in self.targets:
                raise TargetDefinitionError(
                    f"Duplicate target '{definition.name}' in {yaml_file} "
                    f"(already declared in {self.targets[definition.name].source})"
                )
            self.targets[definition.name] = definition
        logger.debug("Loaded %d target(s) from %s", len(self.targets), self.path)
        return self.targets

    def load_file(self, yaml_file: Path) -> TargetDefinition:
        try:
            with open(yaml_file, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise TargetDefinitionError(f"YAML parse error in {yaml_file}: {exc}") from exc

        issues = validate_document(data, yaml_file)
        if issues:
            raise TargetDefinitionError("; ".join(str(issue) for issue in issues))
        return self._resolve_target(data, yaml_file)

    def _resolve_target(self, data: dict, source: Path) -> TargetDefinition:
        fields = [
            FieldDeclaration(
                name=f["name"],
                label=f.get("label"),
                rules=f.get("rules"),
            )
            for f in data.get("fields", [])
        ]
        return TargetDefinition(
            name=data["target"],
            fields=fields,
            description=data.get("description", ""),
            error_format=data.get("options", {}).get("errorFormat"),
            source=source,
        )

    def declare_all(self, store: FieldMetadataStore | None = None) -> list[str]:
        """Declare every loaded target into a store; returns the target names."""
        for definition in self.targets.values():
            definition.declare(store)
        return list(self.targets)

    def get_target(self, name: str) -> TargetDefinition | None:
        return self.targets.get(name)

    def list_targets(self) -> list[str]:
        return list(self.targets.keys())
