"""Action pipeline for hookflow.

Sequences a single action invocation:

    setup -> authorize -> before -> authorize -> primary
          -> after_success | after_failure -> after

Every phase runs its registered hooks in order and then, if the Context
class defines one, its phase override method (e.g. setup_create). The
bag returned by the final after phase is the result of the invocation.
"""

import logging
from collections.abc import Mapping
from typing import Any

from hookflow.definition import ActionDefinition, Definition
from hookflow.runner import as_options, call_entry, run_hooks
from hookflow.types import CheckpointStage, Options, Phase

logger = logging.getLogger(__name__)


class ActionPipeline:
    """Runs declared actions of one Definition against a Context."""

    def __init__(self, definition: Definition):
        self.definition = definition

    def run(self, context: Any, action_name: str, options: Mapping[str, Any]) -> Any:
        """Run an action end to end and return the final options bag.

        The primary step's outcome only selects the outcome phase; it is
        not returned. Hook exceptions propagate unchanged.

        Raises:
            UnknownActionError: If the action was never declared
        """
        action = self.definition.get_action(action_name)
        options = Options(options)
        options["action"] = action.name

        logger.debug("Running action '%s' on %s", action.name, type(context).__name__)

        options = self.run_phase(context, action.name, Phase.SETUP, options)
        self._checkpoint(context, action.name, options, CheckpointStage.SETUP)

        options = self.run_phase(context, action.name, Phase.BEFORE, options)
        self._checkpoint(context, action.name, options, CheckpointStage.BEFORE)

        if self.run_primary(context, action, options):
            logger.debug("Action '%s' succeeded", action.name)
            options = self.run_phase(context, action.name, Phase.AFTER_SUCCESS, options)
        else:
            logger.debug("Action '%s' failed", action.name)
            options = self.run_phase(context, action.name, Phase.AFTER_FAILURE, options)

        return self.run_phase(context, action.name, Phase.AFTER, options)

    def run_phase(self, context: Any, action_name: str, phase: Phase, options: Any) -> Any:
        """Run a phase's hooks, then the Context's override method for it."""
        options = run_hooks(self.definition.hooks(action_name, phase), context, options)

        override = phase.method_name(action_name)
        if callable(getattr(type(context), override, None)):
            options = as_options(getattr(context, override)(**options))
        return options

    def run_primary(self, context: Any, action: ActionDefinition, options: Any) -> Any:
        """Call the action's primary step and return its raw outcome."""
        return call_entry(action.primary, context, options)

    def _checkpoint(
        self,
        context: Any,
        action_name: str,
        options: Any,
        stage: CheckpointStage,
    ) -> None:
        # Contexts built with check_authorization=False carry no authorizer
        if getattr(context, "authorizer", None) is None:
            return
        context.authorize(action_name, **options)
        context.last_checkpoint = stage
