"""hookflow CLI entry point."""

import click

from hookflow.config import HookflowConfig, configure_logging, get_config


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """hookflow — action pipeline definition tools."""
    config = get_config()
    if verbose:
        config = HookflowConfig(
            log_level="DEBUG",
            log_unconfigured_authorization=config.log_unconfigured_authorization,
        )
    configure_logging(config)


# Register subcommands
from hookflow.cli.definition_cmd import describe, validate  # noqa: E402

cli.add_command(describe)
cli.add_command(validate)
