"""Exceptions raised by hookflow.

Declaration problems (duplicate names, hooks without a body) are raised
while a Definition is being built, before any pipeline runs. Exceptions
raised inside hook bodies are never wrapped; they reach the caller of
Context.invoke() unchanged.
"""


class HookflowError(Exception):
    """Base exception for hookflow configuration errors."""

    pass


class DuplicateDeclarationError(HookflowError):
    """An action or authorization key was declared twice on one Definition."""

    pass


class MalformedHookError(HookflowError):
    """A hook was registered without a usable method name or block."""

    pass


class UnknownActionError(HookflowError, KeyError):
    """The action name has not been declared on the Definition."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return Exception.__str__(self)


class UnknownIntervalError(HookflowError, KeyError):
    """The interval name has not been declared on the Definition."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class DefinitionLoadError(HookflowError):
    """A YAML definition document could not be parsed or validated."""

    pass
