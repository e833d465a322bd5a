"""Schema-change operations - typed values the guard evaluates before execution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class OperationKind(str, Enum):
    """Closed set of schema-change calls understood by the rule catalog."""

    DROP_COLUMN = "drop_column"
    DROP_COLUMNS = "drop_columns"
    DROP_TIMESTAMPS = "drop_timestamps"
    DROP_REFERENCE = "drop_reference"
    DROP_BELONGS_TO = "drop_belongs_to"
    CHANGE_TABLE = "change_table"
    RENAME_TABLE = "rename_table"
    RENAME_COLUMN = "rename_column"
    ADD_INDEX = "add_index"
    ADD_COLUMN = "add_column"
    CHANGE_COLUMN_TYPE = "change_column_type"
    CREATE_TABLE = "create_table"
    ADD_REFERENCE = "add_reference"
    ADD_BELONGS_TO = "add_belongs_to"
    EXECUTE = "execute"
    CHANGE_COLUMN_NULL = "change_column_null"


def _freeze(options: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(options or {}))


@dataclass(frozen=True)
class Operation:
    """A single schema-change call.

    ``arguments`` holds the positional values after the table name,
    ``options`` the keyword options (``default=``, ``unique=``, ...).
    ``kind`` may be any string when the calling layer forwards a call the
    catalog does not know; such operations always proceed.
    """

    kind: OperationKind | str
    table: str
    arguments: tuple[Any, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, OperationKind):
            try:
                object.__setattr__(self, "kind", OperationKind(self.kind))
            except ValueError:
                pass  # unknown kinds pass through unchecked
        object.__setattr__(self, "arguments", tuple(self.arguments))
        object.__setattr__(self, "options", _freeze(self.options))

    @property
    def name(self) -> str:
        return self.kind.value if isinstance(self.kind, OperationKind) else str(self.kind)

    def argument(self, index: int, default: Any = None) -> Any:
        """Positional argument at ``index``, or ``default`` when absent."""
        if index < len(self.arguments):
            return self.arguments[index]
        return default

    def command(self, *, exclude: tuple[str, ...] = (), **extra: Any) -> str:
        """Render the call as migration source, e.g. ``add_index("users", "email")``.

        ``exclude`` drops options; ``extra`` appends options after the
        remaining ones.
        """
        parts = [repr(self.table)] if self.table else []
        parts.extend(repr(a) for a in self.arguments)
        opts = {k: v for k, v in self.options.items() if k not in exclude}
        opts.update(extra)
        parts.extend(f"{k}={v!r}" for k, v in opts.items())
        return f"{self.name}({', '.join(parts)})"

    def describe(self) -> str:
        label = self.name.replace("_", " ").capitalize()
        return f"{label} on {self.table}" if self.table else label

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.name,
            "table": self.table,
            "arguments": list(self.arguments),
            "options": dict(self.options),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Operation:
        return cls(
            kind=d["kind"],
            table=d.get("table", ""),
            arguments=tuple(d.get("arguments", ())),
            options=d.get("options", {}),
        )


def operation_from_dict(d: dict[str, Any]) -> Operation:
    """Deserialize an operation from a dict."""
    if "kind" not in d:
        raise ValueError(f"Operation dict has no kind: {d!r}")
    return Operation.from_dict(d)


# ── Builders ─────────────────────────────────────────────────────────


def drop_column(table: str, column: str, type: str | None = None, **options: Any) -> Operation:
    args = (column,) if type is None else (column, type)
    return Operation(OperationKind.DROP_COLUMN, table, args, options)


def drop_columns(table: str, *columns: str) -> Operation:
    return Operation(OperationKind.DROP_COLUMNS, table, columns)


def drop_timestamps(table: str, **options: Any) -> Operation:
    return Operation(OperationKind.DROP_TIMESTAMPS, table, (), options)


def drop_reference(table: str, ref: str, **options: Any) -> Operation:
    return Operation(OperationKind.DROP_REFERENCE, table, (ref,), options)


def drop_belongs_to(table: str, ref: str, **options: Any) -> Operation:
    return Operation(OperationKind.DROP_BELONGS_TO, table, (ref,), options)


def change_table(table: str, **options: Any) -> Operation:
    return Operation(OperationKind.CHANGE_TABLE, table, (), options)


def rename_table(table: str, new_name: str) -> Operation:
    return Operation(OperationKind.RENAME_TABLE, table, (new_name,))


def rename_column(table: str, old: str, new: str) -> Operation:
    return Operation(OperationKind.RENAME_COLUMN, table, (old, new))


def add_index(table: str, columns: str | list[str], **options: Any) -> Operation:
    return Operation(OperationKind.ADD_INDEX, table, (columns,), options)


def add_column(table: str, column: str, type: str, **options: Any) -> Operation:
    return Operation(OperationKind.ADD_COLUMN, table, (column, type), options)


def change_column_type(table: str, column: str, type: str, **options: Any) -> Operation:
    return Operation(OperationKind.CHANGE_COLUMN_TYPE, table, (column, type), options)


def create_table(table: str, **options: Any) -> Operation:
    return Operation(OperationKind.CREATE_TABLE, table, (), options)


def add_reference(table: str, ref: str, **options: Any) -> Operation:
    return Operation(OperationKind.ADD_REFERENCE, table, (ref,), options)


def add_belongs_to(table: str, ref: str, **options: Any) -> Operation:
    return Operation(OperationKind.ADD_BELONGS_TO, table, (ref,), options)


def execute(sql: str) -> Operation:
    return Operation(OperationKind.EXECUTE, "", (sql,))


def change_column_null(table: str, column: str, null: bool, default: Any = None) -> Operation:
    return Operation(OperationKind.CHANGE_COLUMN_NULL, table, (column, null, default))
