"""Load action definitions from YAML files.

A definition document names everything by Context method name, so the
same file can be applied to any Context subclass providing those
methods:

    name: WidgetContext
    actions:
      create:
        with: perform_create
        setup:
          - assign_defaults
        before:
          - method: validate
            if: strict
        after_success:
          - method: notify
            unless: quiet
    authorize:
      create: can_create
      default: can_anything
    intervals:
      audit:
        - write_audit

Guards in YAML name an option key; the hook runs when that option is
truthy (if) or falsy (unless).
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from hookflow.context import Context
from hookflow.definition import Definition
from hookflow.errors import DefinitionLoadError
from hookflow.types import Guard, Options, Phase

# Key under "authorize" that maps to the default (wildcard) authorization
DEFAULT_AUTHORIZATION_KEY = "default"


class HookSpec(BaseModel):
    """A single hook entry in a definition document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    method: str
    if_: str | None = Field(default=None, alias="if")
    unless: str | None = None


def _coerce_hooks(value: Any) -> Any:
    """Allow bare method names in hook lists."""
    if value is None:
        return []
    if isinstance(value, list):
        return [{"method": item} if isinstance(item, str) else item for item in value]
    return value


class ActionSpec(BaseModel):
    """An action and its phase hooks."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    with_: str = Field(alias="with")
    setup: list[HookSpec] = Field(default_factory=list)
    before: list[HookSpec] = Field(default_factory=list)
    after_success: list[HookSpec] = Field(default_factory=list)
    after_failure: list[HookSpec] = Field(default_factory=list)
    after: list[HookSpec] = Field(default_factory=list)

    @field_validator(
        "setup", "before", "after_success", "after_failure", "after", mode="before"
    )
    @classmethod
    def coerce_phase_hooks(cls, value: Any) -> Any:
        return _coerce_hooks(value)


class DefinitionSpec(BaseModel):
    """Top-level definition document."""

    model_config = ConfigDict(extra="forbid")

    name: str = "Definition"
    actions: dict[str, ActionSpec] = Field(default_factory=dict)
    authorize: dict[str, str] = Field(default_factory=dict)
    intervals: dict[str, list[HookSpec]] = Field(default_factory=dict)

    @field_validator("intervals", mode="before")
    @classmethod
    def coerce_intervals(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {name: _coerce_hooks(hooks) for name, hooks in value.items()}
        return value


def option_guard(key: str) -> Guard:
    """Guard that reads an option's truthiness."""

    def guard(options: Options) -> Any:
        return options.get(key)

    guard.__qualname__ = f"option_guard({key!r})"
    return guard


class DefinitionLoader:
    """Builds Definitions from YAML definition documents."""

    def parse(self, text: str, source: str = "<string>") -> DefinitionSpec:
        """Parse and validate a YAML document.

        Raises:
            DefinitionLoadError: On YAML syntax errors or schema violations
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DefinitionLoadError(f"{source}: invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise DefinitionLoadError(f"{source}: expected a mapping at the top level")

        try:
            return DefinitionSpec.model_validate(data)
        except ValidationError as e:
            raise DefinitionLoadError(f"{source}: {e}") from e

    def apply(self, spec: DefinitionSpec, definition: Definition) -> Definition:
        """Declare everything in spec on an existing definition."""
        for action_name, action in spec.actions.items():
            definition.action(action_name, with_=action.with_)
            for phase in Phase:
                for hook in getattr(action, phase.value):
                    definition.register_hook(phase, action_name, **self._hook_kwargs(hook))

        for interval_name, hooks in spec.intervals.items():
            definition.interval(interval_name)
            for hook in hooks:
                definition.on_interval(interval_name, **self._hook_kwargs(hook))

        for key, method in spec.authorize.items():
            action_name = None if key == DEFAULT_AUTHORIZATION_KEY else key
            definition.authorize(action_name, with_=method)

        return definition

    def load_string(
        self,
        text: str,
        base: Definition | None = None,
        source: str = "<string>",
    ) -> Definition:
        spec = self.parse(text, source)
        definition = base.derive(spec.name) if base else Definition(spec.name)
        return self.apply(spec, definition)

    def load(self, path: Path, base: Definition | None = None) -> Definition:
        """Load a definition file, optionally deriving from a base definition."""
        with open(path) as f:
            text = f.read()
        return self.load_string(text, base=base, source=str(path))

    def _hook_kwargs(self, hook: HookSpec) -> dict[str, Any]:
        return {
            "method": hook.method,
            "if_": option_guard(hook.if_) if hook.if_ else None,
            "unless": option_guard(hook.unless) if hook.unless else None,
        }


def load_context(path: Path, base: type[Context] = Context) -> type[Context]:
    """Create a Context subclass of base declared by a YAML file.

    The new class is named after the document's name and inherits the
    base's methods, which the document's method names refer to.
    """
    loader = DefinitionLoader()
    with open(path) as f:
        spec = loader.parse(f.read(), source=str(path))

    context_cls = type(spec.name, (base,), {"__module__": base.__module__})
    loader.apply(spec, context_cls.definition)
    return context_cls
