"""Action definitions for hookflow.

A Definition is the declaration-time blueprint for a family of actions.
Declaring an action creates one HookRegistry per Phase for it; hooks and
authorizations are then registered against those registries. Definitions
are never shared between Context classes: derive() hands a subclass its
own copy.

Usage:
    definition = Definition("WidgetContext")
    definition.action("create", with_="perform_create")
    definition.setup("create", method="assign_defaults")
    definition.after_success("create", block=notify, unless=lambda o: o.get("quiet"))
    definition.authorize("create", with_="can_create")
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from hookflow.errors import (
    DuplicateDeclarationError,
    MalformedHookError,
    UnknownActionError,
    UnknownIntervalError,
)
from hookflow.registry import AuthorizationMap, HookRegistry
from hookflow.types import Block, Guard, HookEntry, Phase


@dataclass(frozen=True)
class ActionDefinition:
    """A declared action and its primary step.

    The primary is an ordinary HookEntry without guards: a method name on
    the Context or a block called as block(context, **options). A truthy
    return marks the action as successful.
    """

    name: str
    primary: HookEntry


class Definition:
    """Declared actions, phase hooks, intervals and authorizations."""

    def __init__(self, name: str = "Definition", reserved: Iterable[str] = ()):
        self.name = name
        self._actions: dict[str, ActionDefinition] = {}
        self._phases: dict[tuple[str, Phase], HookRegistry] = {}
        self._intervals: dict[str, HookRegistry] = {}
        # Attribute names of the owning Context; an action can't shadow them
        self._reserved: frozenset[str] = frozenset(reserved)
        self.authorizations = AuthorizationMap()

    def __repr__(self) -> str:
        return f"Definition({self.name!r}, actions={self.actions!r})"

    # ── Actions ──────────────────────────────────────────────────────────

    def action(
        self,
        name: str,
        with_: str | None = None,
        block: Block | None = None,
    ) -> ActionDefinition:
        """Declare an action and create its five phase registries.

        Args:
            name: Action name, e.g. "create"
            with_: Name of the Context method implementing the primary step
            block: Inline primary, called as block(context, **options)

        Raises:
            DuplicateDeclarationError: If the action is already declared, or
                its name is already an attribute of the owning Context
            MalformedHookError: If neither with_ nor block is given
        """
        if name in self._actions:
            raise DuplicateDeclarationError(
                f"action {name} already defined for {self.name}"
            )
        if name in self._reserved:
            raise DuplicateDeclarationError(
                f"action {name} clashes with an attribute of {self.name}"
            )

        declared = ActionDefinition(name=name, primary=HookEntry(method=with_, block=block))
        self._actions[name] = declared
        for phase in Phase:
            self._phases[(name, phase)] = HookRegistry()
        return declared

    def action_block(self, name: str) -> Callable[[Block], Block]:
        """Decorator declaring an action whose primary is the decorated function."""

        def decorator(fn: Block) -> Block:
            self.action(name, block=fn)
            return fn

        return decorator

    def get_action(self, name: str) -> ActionDefinition:
        """Raises UnknownActionError if the action was never declared."""
        if name not in self._actions:
            raise UnknownActionError(f"action {name} is not defined for {self.name}")
        return self._actions[name]

    def has_action(self, name: str) -> bool:
        return name in self._actions

    def reserve(self, names: Iterable[str]) -> None:
        """Mark names as unavailable for actions.

        Raises:
            DuplicateDeclarationError: If a name is already a declared action
        """
        names = frozenset(names)
        clashes = sorted(names & self._actions.keys())
        if clashes:
            raise DuplicateDeclarationError(
                f"{self.name} attribute(s) {', '.join(clashes)} shadow declared actions"
            )
        self._reserved |= names

    @property
    def actions(self) -> list[str]:
        """Declared action names in declaration order."""
        return list(self._actions)

    # ── Phase hooks ──────────────────────────────────────────────────────

    def registry(self, action: str, phase: Phase | str) -> HookRegistry:
        """Return the registry for one phase of a declared action."""
        try:
            phase = Phase(phase)
        except ValueError:
            raise MalformedHookError(
                f"Unknown phase {phase!r}; expected one of: "
                + ", ".join(p.value for p in Phase)
            ) from None
        if action not in self._actions:
            raise UnknownActionError(f"action {action} is not defined for {self.name}")
        return self._phases[(action, phase)]

    def register_hook(
        self,
        phase: Phase | str,
        action: str,
        method: str | None = None,
        block: Block | None = None,
        if_: Guard | None = None,
        unless: Guard | None = None,
    ) -> HookEntry:
        """Append a hook to a phase of a declared action.

        Raises:
            UnknownActionError: If the action was never declared
            MalformedHookError: If neither method nor block is given
        """
        return self.registry(action, phase).register(
            method=method, block=block, if_=if_, unless=unless
        )

    def setup(self, action: str, method: str | None = None, block: Block | None = None,
              if_: Guard | None = None, unless: Guard | None = None) -> HookEntry:
        return self.register_hook(Phase.SETUP, action, method, block, if_, unless)

    def before(self, action: str, method: str | None = None, block: Block | None = None,
               if_: Guard | None = None, unless: Guard | None = None) -> HookEntry:
        return self.register_hook(Phase.BEFORE, action, method, block, if_, unless)

    def after_success(self, action: str, method: str | None = None, block: Block | None = None,
                      if_: Guard | None = None, unless: Guard | None = None) -> HookEntry:
        return self.register_hook(Phase.AFTER_SUCCESS, action, method, block, if_, unless)

    def after_failure(self, action: str, method: str | None = None, block: Block | None = None,
                      if_: Guard | None = None, unless: Guard | None = None) -> HookEntry:
        return self.register_hook(Phase.AFTER_FAILURE, action, method, block, if_, unless)

    def after(self, action: str, method: str | None = None, block: Block | None = None,
              if_: Guard | None = None, unless: Guard | None = None) -> HookEntry:
        return self.register_hook(Phase.AFTER, action, method, block, if_, unless)

    def hook(
        self,
        phase: Phase | str,
        action: str,
        if_: Guard | None = None,
        unless: Guard | None = None,
    ) -> Callable[[Block], Block]:
        """Decorator registering the decorated function as a block hook.

        Usage:
            @definition.hook(Phase.BEFORE, "create")
            def stamp(context, **options):
                return {**options, "stamped": True}
        """

        def decorator(fn: Block) -> Block:
            self.register_hook(phase, action, block=fn, if_=if_, unless=unless)
            return fn

        return decorator

    def hooks(self, action: str, phase: Phase | str) -> tuple[HookEntry, ...]:
        return self.registry(action, phase).entries()

    # ── Intervals ────────────────────────────────────────────────────────

    def interval(self, name: str) -> HookRegistry:
        """Declare a free-standing hook group.

        Redeclaring an existing interval keeps its registry untouched.
        """
        if name not in self._intervals:
            self._intervals[name] = HookRegistry()
        return self._intervals[name]

    def intervals(self, *names: str) -> None:
        for name in names:
            self.interval(name)

    def interval_registry(self, name: str) -> HookRegistry:
        if name not in self._intervals:
            raise UnknownIntervalError(f"interval {name} is not defined for {self.name}")
        return self._intervals[name]

    def on_interval(
        self,
        name: str,
        method: str | None = None,
        block: Block | None = None,
        if_: Guard | None = None,
        unless: Guard | None = None,
    ) -> HookEntry:
        return self.interval_registry(name).register(
            method=method, block=block, if_=if_, unless=unless
        )

    @property
    def interval_names(self) -> list[str]:
        return list(self._intervals)

    # ── Authorization ────────────────────────────────────────────────────

    def authorize(
        self,
        action: str | None = None,
        with_: str | None = None,
        block: Block | None = None,
    ) -> HookEntry:
        """Register the authorization hook for an action, or the default when action is None.

        Authorization hooks take no guards. Their return value is reported
        to the pipeline unchanged.

        Raises:
            DuplicateDeclarationError: If the action (or default) already has one
            MalformedHookError: If neither with_ nor block is given
        """
        try:
            return self.authorizations.register(action, method=with_, block=block)
        except DuplicateDeclarationError as e:
            raise DuplicateDeclarationError(f"{self.name}: {e}") from None

    # ── Inheritance ──────────────────────────────────────────────────────

    def derive(self, name: str | None = None) -> "Definition":
        """Copy this definition for a derived Context.

        Every phase registry, interval registry and the authorization map
        is duplicated, so later registrations on either definition stay
        local to it.
        """
        derived = Definition(name or self.name, reserved=self._reserved)
        derived._actions = dict(self._actions)
        derived._phases = {key: registry.copy() for key, registry in self._phases.items()}
        derived._intervals = {key: registry.copy() for key, registry in self._intervals.items()}
        derived.authorizations = self.authorizations.copy()
        return derived
