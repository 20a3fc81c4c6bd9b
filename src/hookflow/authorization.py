"""Authorization checkpoint for hookflow.

The pipeline asks an Authorizer for a decision twice per action: after
the setup phase and after the before phase. The decision is recorded
and returned, never enforced here; halting on a denial is up to the
hooks that observe it.
"""

import logging
from typing import Any, Protocol

from hookflow.config import get_config
from hookflow.registry import AuthorizationMap
from hookflow.runner import call_entry
from hookflow.types import Options

logger = logging.getLogger(__name__)


class Authorizer(Protocol):
    """Capability a Context uses to authorize actions."""

    def authorize(self, action: str, context: Any, options: Options) -> Any:
        ...


class DefinitionAuthorizer:
    """Authorizer backed by a Definition's AuthorizationMap.

    Lookup order: the action's own entry, then the default entry. With
    neither configured the action is allowed.
    """

    def __init__(
        self,
        authorizations: AuthorizationMap,
        log_unconfigured: bool | None = None,
    ):
        self.authorizations = authorizations
        if log_unconfigured is None:
            log_unconfigured = get_config().log_unconfigured_authorization
        self.log_unconfigured = log_unconfigured

    def authorize(self, action: str, context: Any, options: Options) -> Any:
        """Run the matching authorization hook and return its result as-is."""
        entry = self.authorizations.lookup(action)
        if entry is None:
            if self.log_unconfigured:
                logger.info(
                    "No authorization configured for %s in %s. Authorize not called",
                    action,
                    type(context).__name__,
                )
            return True

        return call_entry(entry, context, options)
