"""Exception hierarchy for safemigrate."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from safemigrate.decision import Diagnostic
    from safemigrate.operations import Operation


class SafeMigrateError(Exception):
    """Base exception for all safemigrate errors."""


class UnsafeOperationError(SafeMigrateError):
    """A built-in rule judged the operation dangerous; the run must stop."""

    def __init__(
        self,
        diagnostic: Diagnostic,
        *,
        operation: Operation | None = None,
        rule_key: str | None = None,
    ) -> None:
        super().__init__(diagnostic.render())
        self.diagnostic = diagnostic
        self.operation = operation
        self.rule_key = rule_key


class PolicyViolationError(UnsafeOperationError):
    """A registered custom check rejected the operation."""


class ConfigurationError(SafeMigrateError):
    """Rule catalog, message templates or settings are malformed."""
