"""Target declaration CLI commands."""

from pathlib import Path

import click

from ruleforge.metadata.loader import TargetDefinitionError, TargetLoader
from ruleforge.metadata.schema import validate_target_dir, validate_target_file


@click.group()
def targets():
    """Target declaration commands."""
    pass


@targets.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
def check(path: Path, strict: bool):
    """Validate target YAML files against the target JSON Schema."""
    if path.is_dir():
        issues = validate_target_dir(path, strict=strict)
    else:
        issues = validate_target_file(path)
        if strict:
            for issue in issues:
                issue.severity = "error"

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]

    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} schema error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    try:
        loader = TargetLoader(path)
        loader.load_all()
    except TargetDefinitionError as e:
        click.echo(click.style(f"\nTarget loading failed: {e}", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(f"\nLoaded {len(loader.targets)} target(s):")
    for name in sorted(loader.targets):
        definition = loader.targets[name]
        click.echo(f"  ✓ {name} ({len(definition.fields)} fields)")

    click.echo(click.style("\nAll targets are valid.", fg="green", bold=True))
