"""Runtime configuration for hookflow."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}

_config: HookflowConfig | None = None


@dataclass
class HookflowConfig:
    """Package-wide settings.

    Attributes:
        log_level: Level applied to the "hookflow" logger by configure_logging()
        log_unconfigured_authorization: Emit an INFO notice when an action
            has no authorization hook and the checkpoint passes by default
    """

    log_level: str = "WARNING"
    log_unconfigured_authorization: bool = True

    @classmethod
    def from_env(cls) -> HookflowConfig:
        """Create config from environment variables.

        HOOKFLOW_LOG_LEVEL: logger level name (default WARNING)
        HOOKFLOW_LOG_UNCONFIGURED_AUTHORIZATION: 1/true/yes/on (default on)
        """
        level = os.environ.get("HOOKFLOW_LOG_LEVEL", "WARNING").upper()
        notice = os.environ.get("HOOKFLOW_LOG_UNCONFIGURED_AUTHORIZATION")
        return cls(
            log_level=level,
            log_unconfigured_authorization=(
                True if notice is None else notice.strip().lower() in _TRUE_VALUES
            ),
        )


def get_config() -> HookflowConfig:
    """Return the active config, reading the environment on first use."""
    global _config
    if _config is None:
        _config = HookflowConfig.from_env()
    return _config


def set_config(config: HookflowConfig | None) -> None:
    """Replace the active config. None resets to environment defaults."""
    global _config
    _config = config


def configure_logging(config: HookflowConfig | None = None) -> None:
    """Apply the configured level to the package logger.

    Handlers are left to the embedding application; a basic stderr
    handler is only installed when the root logger has none.
    """
    config = config or get_config()
    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {config.log_level}")

    if not logging.getLogger().handlers:
        logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("hookflow").setLevel(level)
