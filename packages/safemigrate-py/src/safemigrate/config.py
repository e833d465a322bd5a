"""Runtime configuration for the guard."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping

from safemigrate.checks import CheckRegistry
from safemigrate.exceptions import ConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}


def _int_setting(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class Config:
    """Global settings shared by every run.

    Attributes:
        start_after: Migration versions at or below this are grandfathered.
        auto_analyze: Refresh planner statistics after each index build on Postgres.
        error_messages: Per-rule template overrides, keyed by rule key.
        checks: Custom checks run after the built-in rules.
        batch_size: Batch size used in generated backfill snippets.
        safety_assured_env: Environment variable acting as a blanket override.
    """

    start_after: int = 0
    auto_analyze: bool = False
    error_messages: dict[str, str] = field(default_factory=dict)
    checks: CheckRegistry = field(default_factory=CheckRegistry)
    batch_size: int = 1000
    safety_assured_env: str = "SAFETY_ASSURED"

    def __post_init__(self) -> None:
        if not isinstance(self.checks, CheckRegistry):
            self.checks = CheckRegistry(list(self.checks))
        if self.batch_size <= 0:
            raise ConfigurationError(f"batch_size must be positive, got {self.batch_size}")
        for key, template in self.error_messages.items():
            if not isinstance(template, str):
                raise ConfigurationError(f"Message template for {key!r} must be a string")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> Config:
        """Build a config from ``SAFEMIGRATE_*`` environment variables."""
        env = os.environ if environ is None else environ
        settings: dict[str, Any] = {
            "start_after": _int_setting(env, "SAFEMIGRATE_START_AFTER", 0),
            "auto_analyze": env.get("SAFEMIGRATE_AUTO_ANALYZE", "").lower() in _TRUTHY,
            "batch_size": _int_setting(env, "SAFEMIGRATE_BATCH_SIZE", 1000),
        }
        settings.update(overrides)
        return cls(**settings)

    def blanket_override(self, environ: Mapping[str, str] | None = None) -> bool:
        env = os.environ if environ is None else environ
        return bool(env.get(self.safety_assured_env))
