"""Hook execution for hookflow.

Runs an ordered list of hooks against an options bag. Each hook's return
value becomes the bag handed to the next hook. Guards are evaluated
against the current bag immediately before the hook they guard.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from hookflow.types import HookEntry, Options

logger = logging.getLogger(__name__)


def hook_applies(entry: HookEntry, options: Mapping[str, Any]) -> bool:
    """Evaluate an entry's guards.

    A falsy if_ guard or a truthy unless guard skips the hook.
    """
    if entry.if_ is not None and not entry.if_(options):
        return False
    if entry.unless is not None and entry.unless(options):
        return False
    return True


def call_entry(entry: HookEntry, context: Any, options: Mapping[str, Any]) -> Any:
    """Invoke an entry without evaluating guards and return its raw result.

    Methods are looked up on the context and receive the options as
    keyword arguments; blocks are called as block(context, **options).
    """
    if entry.method is not None:
        return getattr(context, entry.method)(**options)
    return entry.block(context, **options)


def as_options(value: Any) -> Any:
    """Normalize a hook's return value into an Options bag.

    Non-mapping values are handed on unchanged; a hook that returns
    something other than the bag breaks the hooks after it.
    """
    if isinstance(value, Options):
        return value
    if isinstance(value, Mapping):
        return Options(value)
    return value


def run_hook(entry: HookEntry, context: Any, options: Any) -> Any:
    """Run a single hook, returning the bag for the next hook."""
    if not hook_applies(entry, options):
        logger.debug("Skipping hook '%s': guard not satisfied", entry.label)
        return options

    logger.debug("Running hook '%s'", entry.label)
    result = call_entry(entry, context, options)
    if not isinstance(result, Mapping):
        logger.debug(
            "Hook '%s' returned %s instead of the options bag",
            entry.label,
            type(result).__name__,
        )
    return as_options(result)


def run_hooks(entries: Iterable[HookEntry], context: Any, options: Any) -> Any:
    """Run hooks sequentially, threading the options bag through them.

    An empty sequence returns the bag unchanged. Exceptions raised by a
    hook propagate to the caller.
    """
    for entry in entries:
        options = run_hook(entry, context, options)
    return options
