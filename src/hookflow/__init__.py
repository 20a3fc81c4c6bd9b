"""hookflow — declarative action pipelines with guarded hooks.

Every declared action runs as a fixed pipeline:
- setup: prepare the options bag
- (authorization checkpoint)
- before: last changes before the primary step
- (authorization checkpoint)
- primary: the action itself; a truthy return means success
- after_success / after_failure: exactly one runs, depending on the outcome
- after: always runs

Usage:
    from hookflow import Context

    class WidgetContext(Context):
        @classmethod
        def declare(cls, definition):
            definition.action("create", with_="perform_create")
            definition.before("create", method="validate", if_=lambda o: o.get("strict"))
            definition.authorize(with_="can_write")

    options = WidgetContext(entity=widget).create(strict=True)
"""

from hookflow.authorization import Authorizer, DefinitionAuthorizer
from hookflow.config import HookflowConfig, configure_logging, get_config, set_config
from hookflow.context import Context
from hookflow.definition import ActionDefinition, Definition
from hookflow.errors import (
    DefinitionLoadError,
    DuplicateDeclarationError,
    HookflowError,
    MalformedHookError,
    UnknownActionError,
    UnknownIntervalError,
)
from hookflow.loader import DefinitionLoader, load_context
from hookflow.pipeline import ActionPipeline
from hookflow.registry import AuthorizationMap, HookRegistry
from hookflow.runner import run_hook, run_hooks
from hookflow.types import CheckpointStage, HookEntry, Options, Phase

__all__ = [
    "ActionDefinition",
    "ActionPipeline",
    "AuthorizationMap",
    "Authorizer",
    "CheckpointStage",
    "Context",
    "Definition",
    "DefinitionAuthorizer",
    "DefinitionLoadError",
    "DefinitionLoader",
    "DuplicateDeclarationError",
    "HookEntry",
    "HookRegistry",
    "HookflowConfig",
    "HookflowError",
    "MalformedHookError",
    "Options",
    "Phase",
    "UnknownActionError",
    "UnknownIntervalError",
    "configure_logging",
    "get_config",
    "load_context",
    "run_hook",
    "run_hooks",
    "set_config",
]
