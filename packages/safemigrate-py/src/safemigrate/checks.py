"""Custom check registry - organization-specific policy run after the built-in rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from safemigrate.decision import Diagnostic
from safemigrate.exceptions import ConfigurationError, PolicyViolationError

if TYPE_CHECKING:
    from safemigrate.context import DatabaseContext
    from safemigrate.operations import Operation, OperationKind
    from safemigrate.state import RunState

CUSTOM_CHECK_HEADER = "Custom check"


@dataclass
class CheckContext:
    """What a custom check sees besides the kind and raw arguments."""

    operation: Operation
    state: RunState
    db: DatabaseContext
    check_name: str = ""

    def stop(self, message: str, *, header: str = CUSTOM_CHECK_HEADER) -> None:
        """Halt the run with ``message``, the same way built-in rules do."""
        diagnostic = Diagnostic(header, message, rule_key=self.check_name)
        raise PolicyViolationError(diagnostic, operation=self.operation, rule_key=self.check_name)


# check(context, kind, arguments) -> message or None
Check = Callable[["CheckContext", "OperationKind | str", "tuple[Any, ...]"], "str | None"]


class CheckRegistry:
    """Ordered custom checks. Register at configuration time, before any run."""

    def __init__(self, checks: list[Check] | None = None) -> None:
        self._checks: list[Check] = []
        for check in checks or []:
            self.register(check)

    def __len__(self) -> int:
        return len(self._checks)

    def __iter__(self):
        return iter(self._checks)

    def register(self, check: Check) -> Check:
        """Add a check. Can be used as a decorator."""
        if not callable(check):
            raise ConfigurationError(f"Custom check must be callable, got {check!r}")
        self._checks.append(check)
        return check

    def run(self, op: Operation, state: RunState, db: DatabaseContext) -> Diagnostic | None:
        """Run every check in registration order; return the first violation."""
        raw_arguments = (op.table, *op.arguments) if op.table else op.arguments
        if op.options:
            raw_arguments = (*raw_arguments, dict(op.options))
        for check in self._checks:
            name = getattr(check, "__name__", type(check).__name__)
            context = CheckContext(op, state, db, check_name=name)
            try:
                message = check(context, op.kind, raw_arguments)
            except PolicyViolationError as exc:
                return exc.diagnostic
            if message:
                return Diagnostic(CUSTOM_CHECK_HEADER, str(message), rule_key=name)
        return None
