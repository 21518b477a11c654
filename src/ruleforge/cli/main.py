"""ruleforge CLI entry point."""

import logging

import click

from ruleforge.config import EngineConfig


@click.group()
@click.option(
    "--locale",
    default=None,
    help="Message catalog locale (defaults to RULEFORGE_LOCALE or 'en').",
)
@click.option(
    "--log-level",
    default=None,
    help="Logging level (defaults to RULEFORGE_LOG_LEVEL or WARNING).",
)
@click.pass_context
def cli(ctx: click.Context, locale: str | None, log_level: str | None):
    """ruleforge — declarative validation rules CLI."""
    config = EngineConfig.from_env()
    if locale:
        config.locale = locale
    if log_level:
        config.log_level = log_level.upper()
    logging.basicConfig(
        level=config.logging_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


# Register subcommand groups
from ruleforge.cli.rules_cmd import rules  # noqa: E402
from ruleforge.cli.targets_cmd import targets  # noqa: E402
from ruleforge.cli.validate_cmd import validate  # noqa: E402

cli.add_command(rules)
cli.add_command(targets)
cli.add_command(validate)
