"""Definition CLI commands — describe and validate."""

import importlib
import sys
from pathlib import Path

import click

from hookflow.context import Context
from hookflow.definition import Definition
from hookflow.errors import HookflowError
from hookflow.loader import DefinitionLoader
from hookflow.types import Phase


def _resolve_definition(target: str) -> Definition:
    """Import MODULE:ATTR and return the Definition it names."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise click.BadParameter("expected MODULE:ATTR", param_hint="TARGET")

    # Allow targets in the current directory, like python -m
    if "" not in sys.path:
        sys.path.insert(0, "")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}", param_hint="TARGET")

    obj = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise click.BadParameter(f"{module_name} has no attribute {attr}", param_hint="TARGET")

    if isinstance(obj, Definition):
        return obj
    if isinstance(obj, type) and issubclass(obj, Context):
        return obj.definition
    raise click.BadParameter(
        f"{target} is neither a Definition nor a Context subclass", param_hint="TARGET"
    )


def _echo_definition(definition: Definition) -> None:
    click.echo(click.style(f"Definition: {definition.name}", bold=True))

    if not definition.actions:
        click.echo("  (no actions)")
    for action_name in definition.actions:
        primary = definition.get_action(action_name).primary
        click.echo(f"  {action_name} (primary: {primary.label})")
        for phase in Phase:
            hooks = definition.hooks(action_name, phase)
            labels = ", ".join(entry.label for entry in hooks)
            click.echo(f"    {phase.value}: {len(hooks)} hook(s)" + (f" [{labels}]" if labels else ""))

    if definition.interval_names:
        click.echo("\nIntervals:")
        for name in definition.interval_names:
            click.echo(f"  {name}: {len(definition.interval_registry(name))} hook(s)")

    keys = definition.authorizations.keys()
    click.echo("\nAuthorization: " + (
        ", ".join(key if key is not None else "default" for key in keys) if keys else "none"
    ))


@click.command()
@click.argument("target")
def describe(target: str):
    """Show the actions and hooks of a Definition or Context (MODULE:ATTR)."""
    _echo_definition(_resolve_definition(target))


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(path: Path):
    """Validate a YAML definition file."""
    try:
        definition = DefinitionLoader().load(path)
    except HookflowError as e:
        click.echo(click.style(f"Invalid definition: {e}", fg="red"), err=True)
        raise SystemExit(1)

    _echo_definition(definition)
    click.echo(click.style("\nDefinition is valid.", fg="green", bold=True))
