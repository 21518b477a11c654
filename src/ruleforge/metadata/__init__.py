"""YAML declaration surface for ruleforge targets."""

from ruleforge.metadata.loader import (
    FieldDeclaration,
    TargetDefinition,
    TargetDefinitionError,
    TargetLoader,
)
from ruleforge.metadata.schema import SchemaIssue, validate_target_dir, validate_target_file

__all__ = [
    "FieldDeclaration",
    "SchemaIssue",
    "TargetDefinition",
    "TargetDefinitionError",
    "TargetLoader",
    "validate_target_dir",
    "validate_target_file",
]
