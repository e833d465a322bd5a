"""Operation interceptor - evaluates each schema change before it reaches the executor."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Protocol

from safemigrate.config import Config
from safemigrate.decision import Block, Decision, Diagnostic, Proceed
from safemigrate.exceptions import ConfigurationError, PolicyViolationError, UnsafeOperationError
from safemigrate.operations import Operation, OperationKind, execute
from safemigrate.remediation import lookup_template, quote_table_name, render_message
from safemigrate.rules import CATALOG, Rule, Unsafe, rules_for, validate_catalog
from safemigrate.state import Direction

if TYPE_CHECKING:
    from safemigrate.context import DatabaseContext
    from safemigrate.state import RunState

logger = logging.getLogger("safemigrate")


class Executor(Protocol):
    """The only way an operation takes effect."""

    def apply(self, operation: Operation) -> Any: ...


class SafetyGuard:
    """Decides, for each operation, whether it may run against a live database."""

    def __init__(
        self,
        config: Config | None = None,
        *,
        catalog: tuple[Rule, ...] = CATALOG,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.config = config or Config()
        self.catalog = catalog
        self._environ = environ
        validate_catalog(catalog, self.config.error_messages)

    # ── Evaluation ────────────────────────────────────────────────────

    def exemption(self, state: RunState) -> str | None:
        """Name of the run-level exemption in force, if any."""
        if state.override_active:
            return "safety_assured"
        if self.config.blanket_override(self._environ):
            return self.config.safety_assured_env
        if state.direction is Direction.DOWN:
            return "rollback"
        if state.schema_load:
            return "schema load"
        if state.is_grandfathered(self.config.start_after):
            return f"version {state.version} <= {self.config.start_after}"
        return None

    def evaluate(self, op: Operation, state: RunState, db: DatabaseContext) -> Decision:
        """Judge ``op``. Never raises for unsafe operations; returns ``Block``."""
        reason = self.exemption(state)
        if reason is not None:
            logger.debug(f"{op.describe()}: exempt ({reason})")
            return Proceed(exempt=True)

        for rule in rules_for(op, self.catalog):
            match = rule.predicate(op, state, db, self.config)
            if match is not None:
                logger.warning(f"{op.describe()}: blocked by rule {rule.key}")
                return Block(self._diagnostic(rule, match, state))

        violation = self.config.checks.run(op, state, db)
        if violation is not None:
            logger.warning(f"{op.describe()}: blocked by custom check {violation.rule_key}")
            return Block(violation, custom=True)

        logger.debug(f"{op.describe()}: safe")
        return Proceed()

    def _diagnostic(self, rule: Rule, match: Unsafe, state: RunState) -> Diagnostic:
        template = lookup_template(rule.key, self.config.error_messages)
        variables = {"migration_name": state.migration_name, **match.variables}
        try:
            body = render_message(template, variables)
        except (KeyError, ValueError, TypeError) as exc:
            raise ConfigurationError(f"Cannot render message template for {rule.key!r}: {exc!r}") from exc
        return Diagnostic(rule.header, body, rule_key=rule.key)

    # ── Enforcement ───────────────────────────────────────────────────

    def check(self, op: Operation, state: RunState, db: DatabaseContext) -> None:
        """Raise if ``op`` must not run."""
        decision = self.evaluate(op, state, db)
        if isinstance(decision, Block):
            diagnostic = decision.diagnostic
            error = PolicyViolationError if decision.custom else UnsafeOperationError
            raise error(diagnostic, operation=op, rule_key=diagnostic.rule_key)

    def apply(self, op: Operation, state: RunState, db: DatabaseContext, executor: Executor) -> Any:
        """Check ``op``, forward it to ``executor`` and record its effect on the run."""
        self.check(op, state, db)
        result = executor.apply(op)

        if op.kind is OperationKind.CREATE_TABLE:
            state.record_new_table(op.table)

        if (
            op.kind is OperationKind.ADD_INDEX
            and self.config.auto_analyze
            and state.direction is Direction.UP
            and db.is_postgres
        ):
            logger.info(f"Refreshing statistics for {op.table}")
            executor.apply(execute(f"ANALYZE VERBOSE {quote_table_name(op.table)}"))

        return result
