"""Rule registry CLI commands."""

import click

from ruleforge.rules import register_builtin_rules
from ruleforge.validation.registry import default_registry


@click.group()
def rules():
    """Rule registry commands."""
    pass


@rules.command("list")
def list_cmd():
    """List the registered rule names."""
    register_builtin_rules()
    names = default_registry.list_registered()
    for name in names:
        click.echo(f"  {name}")
    click.echo(f"\n{len(names)} rule(s) registered.")
