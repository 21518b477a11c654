"""Validation CLI commands: validate a single value or a whole target."""

import asyncio
import json
from pathlib import Path
from typing import Any

import click

from ruleforge.config import EngineConfig
from ruleforge.metadata.loader import TargetDefinitionError, TargetLoader
from ruleforge.rules import register_builtin_rules
from ruleforge.validation.engine import Validator
from ruleforge.validation.metadata import FieldMetadataStore


def _parse_json_option(raw: str | None, option: str) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint=option)


def _parse_value(raw: str) -> Any:
    """Values that parse as JSON are used as such; anything else is a string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _emit(result) -> None:
    click.echo(json.dumps(result.to_dict(), indent=2, default=str))
    if not result.success:
        raise SystemExit(1)


@click.group()
def validate():
    """Validation commands."""
    pass


@validate.command("value")
@click.argument("value")
@click.option("--rules", "rule_spec", required=True, help='Rule spec, e.g. "required|minLength[2]".')
@click.option("--context", "context_json", default=None, help="JSON context passed to rules.")
@click.option("--field", "field_name", default=None, help="Field name used in messages.")
@click.pass_obj
def value_cmd(
    config: EngineConfig,
    value: str,
    rule_spec: str,
    context_json: str | None,
    field_name: str | None,
):
    """Validate VALUE against a rule spec and print the result as JSON."""
    context = _parse_json_option(context_json, "--context")
    register_builtin_rules()
    validator = Validator.from_config(config)
    result = asyncio.run(
        validator.validate(
            _parse_value(value),
            rule_spec,
            context=context,
            field_name=field_name,
        )
    )
    _emit(result)


@validate.command("target")
@click.argument("target")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(exists=True, path_type=Path),
    help="Target YAML file or directory of target files.",
)
@click.option(
    "--data",
    "data_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file holding the object to validate.",
)
@click.option("--context", "context_json", default=None, help="JSON context passed to rules.")
@click.pass_obj
def target_cmd(
    config: EngineConfig,
    target: str,
    schema_path: Path,
    data_path: Path,
    context_json: str | None,
):
    """Validate the JSON object in --data against TARGET's declared rules."""
    context = _parse_json_option(context_json, "--context")

    try:
        loader = TargetLoader(schema_path)
        loader.load_all()
    except TargetDefinitionError as e:
        click.echo(click.style(f"Target loading failed: {e}", fg="red"), err=True)
        raise SystemExit(2)

    if loader.get_target(target) is None:
        available = ", ".join(sorted(loader.list_targets())) or "none"
        click.echo(f"Error: target '{target}' not found (available: {available})", err=True)
        raise SystemExit(2)

    try:
        with data_path.open(encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as e:
        click.echo(f"Error: {data_path} is not valid JSON: {e}", err=True)
        raise SystemExit(2)
    if not isinstance(data, dict):
        click.echo(f"Error: {data_path} must contain a JSON object", err=True)
        raise SystemExit(2)

    store = FieldMetadataStore()
    loader.declare_all(store)
    register_builtin_rules()
    validator = Validator.from_config(config, store=store)
    result = asyncio.run(validator.validate_target(target, data, context=context))
    _emit(result)
