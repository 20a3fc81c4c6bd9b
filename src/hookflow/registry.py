"""Hook and authorization registries for hookflow.

Unlike a global name registry, each Definition owns its own registries:
one HookRegistry per (action, phase) pair and per interval, and a single
AuthorizationMap. Registries are copied, not shared, when a Definition
is derived.
"""

from collections.abc import Iterator

from hookflow.errors import DuplicateDeclarationError
from hookflow.types import Block, Guard, HookEntry


class HookRegistry:
    """Ordered list of hooks for one phase.

    Registration order is execution order. There is no priority and no
    removal; derived definitions get a copy they can extend.
    """

    def __init__(self, entries: list[HookEntry] | None = None):
        self._entries: list[HookEntry] = list(entries or [])

    def register(
        self,
        method: str | None = None,
        block: Block | None = None,
        if_: Guard | None = None,
        unless: Guard | None = None,
    ) -> HookEntry:
        """Append a hook.

        Raises:
            MalformedHookError: If neither method nor block is given
        """
        entry = HookEntry(method=method, block=block, if_=if_, unless=unless)
        self._entries.append(entry)
        return entry

    def entries(self) -> tuple[HookEntry, ...]:
        """Registered hooks in execution order."""
        return tuple(self._entries)

    def copy(self) -> "HookRegistry":
        """Independent registry holding the same (immutable) entries."""
        return HookRegistry(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HookEntry]:
        return iter(self.entries())


class AuthorizationMap:
    """Authorization hooks keyed by action name.

    The key None holds the wildcard entry used for actions without
    their own authorization.
    """

    def __init__(self, entries: dict[str | None, HookEntry] | None = None):
        self._entries: dict[str | None, HookEntry] = dict(entries or {})

    def register(
        self,
        action: str | None = None,
        method: str | None = None,
        block: Block | None = None,
    ) -> HookEntry:
        """Register the authorization hook for an action (None for the default).

        Raises:
            DuplicateDeclarationError: If the key already has an entry
            MalformedHookError: If neither method nor block is given
        """
        if action in self._entries:
            raise DuplicateDeclarationError(
                f"authorize already defined for {action or 'default'}"
            )
        entry = HookEntry(method=method, block=block)
        self._entries[action] = entry
        return entry

    def lookup(self, action: str) -> HookEntry | None:
        """Return the action's entry, else the wildcard entry, else None."""
        entry = self._entries.get(action)
        if entry is None:
            entry = self._entries.get(None)
        return entry

    def keys(self) -> list[str | None]:
        return list(self._entries.keys())

    def copy(self) -> "AuthorizationMap":
        return AuthorizationMap(self._entries)

    def __contains__(self, action: object) -> bool:
        return action in self._entries

    def __len__(self) -> int:
        return len(self._entries)
