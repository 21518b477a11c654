"""
metadata/schema.py — JSON Schema validation for target declaration files.

Usage:
    from ruleforge.metadata.schema import validate_target_dir, validate_target_file

    issues = validate_target_dir(Path("targets"))
    for issue in issues:
        print(issue)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "target.schema.json"


@dataclass
class SchemaIssue:
    """A single schema finding for a target YAML file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "fields[0]/rules"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


@lru_cache(maxsize=1)
def load_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open(encoding="utf-8") as fh:
        return json.load(fh)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def validate_document(doc: Any, source: Path) -> list[SchemaIssue]:
    """Validate an already-parsed target document."""
    validator = Draft202012Validator(load_schema())
    return [
        SchemaIssue(file=source, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=lambda e: list(e.absolute_path))
    ]


def validate_target_file(yaml_path: Path) -> list[SchemaIssue]:
    """
    Validate a single target YAML file against the target schema.

    Returns:
        A list of :class:`SchemaIssue` objects (empty on success).
    """
    try:
        with yaml_path.open(encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [SchemaIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if raw is None:
        return [SchemaIssue(file=yaml_path, message="File is empty or contains only whitespace")]

    issues = validate_document(raw, yaml_path)
    if isinstance(raw, dict) and not raw.get("fields"):
        issues.append(
            SchemaIssue(
                file=yaml_path,
                message="Target declares no fields; it will accept any data",
                severity="warning",
            )
        )
    return issues


def validate_target_dir(target_dir: Path, *, strict: bool = False) -> list[SchemaIssue]:
    """
    Validate every ``*.yaml`` file under *target_dir*.

    Args:
        target_dir: Directory holding target declaration files.
        strict:     If ``True``, warnings are escalated to errors.

    Returns:
        A flat list of :class:`SchemaIssue` objects across all files.
    """
    if not target_dir.is_dir():
        return [
            SchemaIssue(
                file=target_dir,
                message=f"Target directory does not exist: {target_dir}",
            )
        ]

    all_issues: list[SchemaIssue] = []
    for yaml_file in sorted(target_dir.glob("*.yaml")):
        file_issues = validate_target_file(yaml_file)
        if strict:
            for issue in file_issues:
                if issue.severity == "warning":
                    issue.severity = "error"
        all_issues.extend(file_issues)

    if not all_issues:
        logger.debug("All target files under %s are valid", target_dir)
    return all_issues
