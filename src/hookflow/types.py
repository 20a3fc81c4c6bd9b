"""Core types for hookflow.

Defines the data structures shared by the registry, runner and pipeline:
- Phase: the five hook groups surrounding an action's primary step
- CheckpointStage: which authorization checkpoint fired last
- HookEntry: one registered callback plus its guards
- Options: the options bag threaded through an invocation
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from hookflow.errors import MalformedHookError

T = TypeVar("T")

# Guard signature: (options) -> truthy/falsy. Guards must not mutate the bag.
Guard = Callable[[Mapping[str, Any]], Any]

# Block signature: (context, **options) -> Options for hooks, outcome for primaries
Block = Callable[..., Any]


class Phase(Enum):
    """Hook groups of an action, in pipeline order.

    AFTER_SUCCESS and AFTER_FAILURE are mutually exclusive for a single
    invocation; AFTER always runs.
    """

    SETUP = "setup"
    BEFORE = "before"
    AFTER_SUCCESS = "after_success"
    AFTER_FAILURE = "after_failure"
    AFTER = "after"

    def method_name(self, action: str) -> str:
        """Name of the optional Context override method for this phase.

        Example: Phase.AFTER_SUCCESS.method_name("create") == "after_create_success"
        """
        if self is Phase.AFTER_SUCCESS:
            return f"after_{action}_success"
        if self is Phase.AFTER_FAILURE:
            return f"after_{action}_failure"
        return f"{self.value}_{action}"


class CheckpointStage(Enum):
    """The authorization checkpoint that fired last during an invocation."""

    SETUP = "setup"
    BEFORE = "before"


@dataclass(frozen=True)
class HookEntry:
    """A registered hook.

    Attributes:
        method: Name of a method on the Context to call with the options
        block: Inline callable invoked as block(context, **options)
        if_: Guard; the hook is skipped when it returns a falsy value
        unless: Guard; the hook is skipped when it returns a truthy value

    When both method and block are given, method wins.
    """

    method: str | None = None
    block: Block | None = None
    if_: Guard | None = None
    unless: Guard | None = None

    def __post_init__(self) -> None:
        if self.method is None and self.block is None:
            raise MalformedHookError("A hook requires either a method name or a block")
        if self.method is not None and not isinstance(self.method, str):
            raise MalformedHookError(
                f"Hook method must be a method name, got {type(self.method).__name__}"
            )
        if self.block is not None and not callable(self.block):
            raise MalformedHookError("Hook block must be callable")
        for guard_name, guard in (("if", self.if_), ("unless", self.unless)):
            if guard is not None and not callable(guard):
                raise MalformedHookError(f"Hook '{guard_name}' guard must be callable")

    @property
    def label(self) -> str:
        """Human-readable name used in log messages."""
        if self.method is not None:
            return self.method
        return getattr(self.block, "__qualname__", repr(self.block))


class Options(dict[str, Any]):
    """The options bag passed through every phase of an action.

    A plain dict with a couple of typed accessors. Hooks receive its
    contents as keyword arguments and must return the complete bag, not
    just the keys they changed.
    """

    def get_as(self, key: str, expected: type[T], default: T | None = None) -> T | None:
        """Return options[key] checked against an expected type.

        Missing keys and None values return the default.

        Raises:
            TypeError: If the value is present but of the wrong type
        """
        value = self.get(key)
        if value is None:
            return default
        if not isinstance(value, expected):
            raise TypeError(
                f"Option '{key}' expected {expected.__name__}, "
                f"got {type(value).__name__}"
            )
        return value

    def require(self, key: str) -> Any:
        """Return options[key], raising KeyError with a readable message if absent."""
        if key not in self:
            raise KeyError(f"Required option '{key}' is missing")
        return self[key]

    @property
    def action(self) -> str | None:
        """Name of the action being run, set by the pipeline before setup."""
        return self.get("action")
