"""Runtime contexts for hookflow.

A Context subclass owns a Definition and exposes its actions as
methods. Subclassing a Context derives the parent's Definition, so
hooks added to a subclass never show up on the parent.

Usage:
    class WidgetContext(Context):
        @classmethod
        def declare(cls, definition):
            definition.action("create", with_="perform_create")
            definition.setup("create", method="assign_defaults")

        def assign_defaults(self, **options):
            return {**options, "color": options.get("color", "blue")}

        def perform_create(self, **options):
            return widgets.save(self.entity, options["color"])

    result = WidgetContext(entity=widget).create(color="red")
"""

import functools
from collections.abc import Callable
from typing import Any, ClassVar

from hookflow.authorization import Authorizer, DefinitionAuthorizer
from hookflow.definition import Definition
from hookflow.pipeline import ActionPipeline
from hookflow.runner import as_options, run_hooks
from hookflow.types import CheckpointStage, Options


class Context:
    """Runs declared actions against a subject entity.

    Attributes:
        entity: The subject of the actions (opaque, may be None)
        authorizer: Capability consulted at each checkpoint, or None when
            authorization is disabled
        last_checkpoint: Stage of the authorization checkpoint that fired last
        last_authorization: Decision reported by that checkpoint

    A Context instance is not safe for concurrent invocations; create
    one per caller instead.
    """

    definition: ClassVar[Definition] = Definition("Context")

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.definition = cls.definition.derive(cls.__name__)
        cls.definition.reserve(name for name in vars(cls) if not name.startswith("_"))
        # Only the subclass's own declare(); inherited declarations were copied above
        if "declare" in cls.__dict__:
            cls.declare(cls.definition)

    @classmethod
    def declare(cls, definition: Definition) -> None:
        """Override to declare actions, hooks and authorizations for the class."""
        pass

    def __init__(
        self,
        entity: Any = None,
        authorizer: Authorizer | None = None,
        check_authorization: bool = True,
    ):
        self.entity = entity
        if not check_authorization:
            self.authorizer = None
        elif authorizer is not None:
            self.authorizer = authorizer
        else:
            self.authorizer = DefinitionAuthorizer(type(self).definition.authorizations)
        self.last_checkpoint: CheckpointStage | None = None
        self.last_authorization: Any = None

    def __getattr__(self, name: str) -> Callable[..., Any]:
        # Only reached for attributes not found normally
        if not name.startswith("_") and type(self).definition.has_action(name):
            return functools.partial(self.invoke, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def invoke(self, action_name: str, /, **options: Any) -> Options:
        """Run a declared action and return the final options bag."""
        return ActionPipeline(type(self).definition).run(self, action_name, options)

    def authorize(self, action_name: str, /, **options: Any) -> Any:
        """Ask the authorizer about an action; returns True when disabled."""
        if self.authorizer is None:
            return True
        decision = self.authorizer.authorize(action_name, self, Options(options))
        self.last_authorization = decision
        return decision

    def run_interval(self, name: str, /, **options: Any) -> Any:
        """Run an interval's hooks, then the method of the same name if defined."""
        registry = type(self).definition.interval_registry(name)
        result = run_hooks(registry.entries(), self, Options(options))
        if callable(getattr(type(self), name, None)):
            result = as_options(getattr(self, name)(**result))
        return result


# Instance attributes are set in __init__, so dir() doesn't list them
Context.definition.reserve(
    {name for name in dir(Context) if not name.startswith("_")}
    | {"entity", "authorizer", "last_checkpoint", "last_authorization"}
)
