"""
Environment-driven settings for credgraph.

Variables:
    CREDGRAPH_LOG_LEVEL          log level for the "credgraph" logger (default WARNING)
    CREDGRAPH_FREEZE_ON_PREPARE  freeze a Preparator's graph on first prepare()
                                 (default false)

The environment is read only through Settings.from_env(); a bare Settings()
holds the defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .exceptions import ConfigError

LOGGER_NAME = "credgraph"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(
        f"{name} must be a boolean flag, got {raw!r}",
        details={"variable": name, "value": raw},
    )


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    freeze_on_prepare: bool = False

    def __post_init__(self) -> None:
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(
                f"Unknown log level: {self.log_level!r}",
                details={"log_level": self.log_level},
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read settings from CREDGRAPH_* variables (os.environ by default).

        Preparator defaults to Settings(); pass Settings.from_env() to it
        explicitly to honour these variables.

        Raises:
            ConfigError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        return cls(
            log_level=env.get("CREDGRAPH_LOG_LEVEL", "WARNING").upper(),
            freeze_on_prepare=_parse_bool(
                "CREDGRAPH_FREEZE_ON_PREPARE",
                env.get("CREDGRAPH_FREEZE_ON_PREPARE", "false"),
            ),
        )


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Set the package logger level from settings (no handlers are added)."""
    settings = settings or Settings.from_env()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper()))
    return logger


__all__ = ["Settings", "configure_logging", "LOGGER_NAME"]
