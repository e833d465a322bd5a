"""Rule catalog - built-in predicates deciding whether an operation is dangerous.

Each rule applies to a fixed set of operation kinds. Rules are tried in
catalog order and the first match wins, so for kinds covered by more than
one rule the order below is the priority order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping

from safemigrate.exceptions import ConfigurationError
from safemigrate.messages import DEFAULT_MESSAGES
from safemigrate.operations import Operation, OperationKind
from safemigrate.remediation import (
    backfill_code,
    column_literal,
    ignore_columns_code,
    lookup_template,
    model_name,
    name_literal,
    options_literal,
    quote_table_name,
    render_message,
)

if TYPE_CHECKING:
    from safemigrate.config import Config
    from safemigrate.context import DatabaseContext
    from safemigrate.state import RunState

DEFAULT_HEADER = "Dangerous operation detected"
POSSIBLY_DANGEROUS_HEADER = "Possibly dangerous operation"
BEST_PRACTICE_HEADER = "Best practice"

# Postgres 11 adds columns with a constant default without rewriting the table
PG_FAST_DEFAULT_VERSION = 110000
PG_JSONB_VERSION = 90400

K = OperationKind

_PLACEHOLDER_RE = re.compile(r"%\((\w+)\)")


@dataclass(frozen=True)
class Unsafe:
    """A rule match; ``variables`` feed the rule's message template."""

    variables: dict[str, Any] = field(default_factory=dict)


Predicate = Callable[
    [Operation, "RunState", "DatabaseContext", "Config"],
    "Unsafe | None",
]


@dataclass(frozen=True)
class Rule:
    key: str
    kinds: frozenset[OperationKind]
    predicate: Predicate
    header: str = DEFAULT_HEADER
    # template variables the predicate emits, besides migration_name
    variables: frozenset[str] = frozenset()

    def applies_to(self, op: Operation) -> bool:
        return op.kind in self.kinds


# ── Helpers ──────────────────────────────────────────────────────────


def reference_columns(ref: str, options: Mapping[str, Any]) -> list[str]:
    columns = []
    if options.get("polymorphic"):
        columns.append(f"{ref}_type")
    columns.append(f"{ref}_id")
    return columns


def dropped_columns(op: Operation) -> list[str]:
    if op.kind is K.DROP_TIMESTAMPS:
        return ["created_at", "updated_at"]
    if op.kind is K.DROP_COLUMN:
        return [str(op.argument(0))]
    if op.kind is K.DROP_COLUMNS:
        return [str(c) for c in op.arguments]
    return reference_columns(str(op.argument(0)), op.options)


# ── Predicates ───────────────────────────────────────────────────────


def _drop_column(op: Operation, state: RunState, db: DatabaseContext, config: Config) -> Unsafe | None:
    columns = dropped_columns(op)
    return Unsafe({
        "model": model_name(op.table),
        "code": ignore_columns_code(columns),
        "command": op.command(),
        "column_suffix": "s" if len(columns) > 1 else "",
    })


def _always(op: Operation, state: RunState, db: DatabaseContext, config: Config) -> Unsafe | None:
    return Unsafe()


def _add_index_columns(op: Operation, state: RunState, db: DatabaseContext, config: Config) -> Unsafe | None:
    columns = op.argument(0)
    if isinstance(columns, (list, tuple)) and len(columns) > 3 and not op.options.get("unique"):
        return Unsafe()
    return None


def _add_index(op: Operation, state: RunState, db: DatabaseContext, config: Config) -> Unsafe | None:
    if op.options.get("algorithm") == "concurrently" or op.table in state.new_tables:
        return None
    if not db.is_postgres:
        return None
    options = {k: v for k, v in op.options.items() if k != "algorithm"}
    return Unsafe({
        "table": name_literal(op.table),
        "column": column_literal(op.argument(0)),
        "options": options_literal(options),
    })


def _add_column_default(op: Operation, state: RunState, db: DatabaseContext, config: Config) -> Unsafe | None:
    default = op.options.get("default")
    if default is None:
        return None
    if db.is_postgres and db.server_version >= PG_FAST_DEFAULT_VERSION:
        return None
    column = op.argument(0)
    options = {k: v for k, v in op.options.items() if k != "default"}
    return Unsafe({
        "table": name_literal(op.table),
        "column": name_literal(column),
        "type": name_literal(op.argument(1)),
        "options": options_literal(options),
        "default": repr(default),
        "code": backfill_code(model_name(op.table), column, default, batch_size=config.batch_size),
    })


def _is_json_on_postgres(op: Operation, db: DatabaseContext) -> bool:
    return str(op.argument(1)) == "json" and db.is_postgres


def _add_column_json(op: Operation, state: RunState, db: DatabaseContext, config: Config) -> Unsafe | None:
    if _is_json_on_postgres(op, db) and db.server_version >= PG_JSONB_VERSION:
        return Unsafe()
    return None


def _add_column_json_legacy(op: Operation, state: RunState, db: DatabaseContext, config: Config) -> Unsafe | None:
    if _is_json_on_postgres(op, db) and db.server_version < PG_JSONB_VERSION:
        return Unsafe({
            "model": model_name(op.table),
            "table": quote_table_name(op.table),
        })
    return None


def _change_column(op: Operation, state: RunState, db: DatabaseContext, config: Config) -> Unsafe | None:
    # varchar -> text is a metadata-only widening on Postgres; every other change rewrites
    if db.is_postgres and str(op.argument(1)) == "text":
        if db.column_type(op.table, str(op.argument(0))) == "string":
            return None
    return Unsafe()


def _create_table(op: Operation, state: RunState, db: DatabaseContext, config: Config) -> Unsafe | None:
    return Unsafe() if op.options.get("force") else None


def _add_reference(op: Operation, state: RunState, db: DatabaseContext, config: Config) -> Unsafe | None:
    if not op.options.get("index", True) or not db.is_postgres:
        return None
    ref = str(op.argument(0))
    options = {k: v for k, v in op.options.items() if k != "index"}
    return Unsafe({
        "command": op.name,
        "table": name_literal(op.table),
        "reference": name_literal(ref),
        "column": column_literal(reference_columns(ref, op.options)),
        "options": options_literal(options),
    })


def _change_column_null(op: Operation, state: RunState, db: DatabaseContext, config: Config) -> Unsafe | None:
    column, null, default = op.argument(0), op.argument(1, True), op.argument(2)
    if null or default is None:
        return None
    return Unsafe({
        "table": name_literal(op.table),
        "column": name_literal(column),
        "code": backfill_code(model_name(op.table), column, default, batch_size=config.batch_size),
    })


# ── Catalog ──────────────────────────────────────────────────────────

DROP_KINDS = frozenset({
    K.DROP_COLUMN, K.DROP_COLUMNS, K.DROP_TIMESTAMPS, K.DROP_REFERENCE, K.DROP_BELONGS_TO,
})

CATALOG: tuple[Rule, ...] = (
    Rule(
        "drop_column", DROP_KINDS, _drop_column,
        variables=frozenset({"model", "code", "command", "column_suffix"}),
    ),
    Rule("change_table", frozenset({K.CHANGE_TABLE}), _always, POSSIBLY_DANGEROUS_HEADER),
    Rule("rename_table", frozenset({K.RENAME_TABLE}), _always),
    Rule("rename_column", frozenset({K.RENAME_COLUMN}), _always),
    Rule(
        "add_index", frozenset({K.ADD_INDEX}), _add_index,
        variables=frozenset({"table", "column", "options"}),
    ),
    Rule("add_index_columns", frozenset({K.ADD_INDEX}), _add_index_columns, BEST_PRACTICE_HEADER),
    Rule(
        "add_column_default", frozenset({K.ADD_COLUMN}), _add_column_default,
        variables=frozenset({"table", "column", "type", "options", "default", "code"}),
    ),
    Rule("add_column_json", frozenset({K.ADD_COLUMN}), _add_column_json),
    Rule(
        "add_column_json_legacy", frozenset({K.ADD_COLUMN}), _add_column_json_legacy,
        variables=frozenset({"model", "table"}),
    ),
    Rule("change_column", frozenset({K.CHANGE_COLUMN_TYPE}), _change_column),
    Rule("create_table", frozenset({K.CREATE_TABLE}), _create_table),
    Rule(
        "add_reference", frozenset({K.ADD_REFERENCE, K.ADD_BELONGS_TO}), _add_reference,
        variables=frozenset({"command", "table", "reference", "column", "options"}),
    ),
    Rule("execute", frozenset({K.EXECUTE}), _always, POSSIBLY_DANGEROUS_HEADER),
    Rule(
        "change_column_null", frozenset({K.CHANGE_COLUMN_NULL}), _change_column_null,
        variables=frozenset({"table", "column", "code"}),
    ),
)


def rules_for(op: Operation, catalog: tuple[Rule, ...] = CATALOG) -> list[Rule]:
    """Rules relevant to ``op``, in priority order."""
    return [rule for rule in catalog if rule.applies_to(op)]


def validate_catalog(
    catalog: tuple[Rule, ...] = CATALOG,
    messages: Mapping[str, str] | None = None,
) -> None:
    """Fail fast on a malformed catalog or unknown message overrides."""
    seen: set[str] = set()
    for rule in catalog:
        if rule.key in seen:
            raise ConfigurationError(f"Duplicate rule key: {rule.key!r}")
        seen.add(rule.key)
        if not rule.kinds:
            raise ConfigurationError(f"Rule {rule.key!r} applies to no operation kinds")
        if not callable(rule.predicate):
            raise ConfigurationError(f"Rule {rule.key!r} has no callable predicate")
        if rule.key not in DEFAULT_MESSAGES and rule.key not in (messages or {}):
            raise ConfigurationError(f"No message template for rule {rule.key!r}")
        _validate_template(rule, lookup_template(rule.key, messages))

    unknown = set(messages or {}) - seen
    if unknown:
        raise ConfigurationError(f"Message overrides for unknown rules: {sorted(unknown)}")


def _validate_template(rule: Rule, template: str) -> None:
    allowed = rule.variables | {"migration_name"}
    unknown = set(_PLACEHOLDER_RE.findall(template)) - allowed
    if unknown:
        raise ConfigurationError(
            f"Message template for {rule.key!r} uses unknown variables: {sorted(unknown)}"
        )
    try:
        render_message(template, {name: name for name in allowed})
    except (KeyError, ValueError, TypeError) as exc:
        raise ConfigurationError(f"Malformed message template for {rule.key!r}: {exc}") from exc
