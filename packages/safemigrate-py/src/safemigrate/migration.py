"""Migration base class - every schema call goes through the guard before it executes."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any

from safemigrate import operations as ops
from safemigrate.config import Config
from safemigrate.context import DatabaseContext, DatabaseContextProvider
from safemigrate.guard import Executor, SafetyGuard
from safemigrate.operations import Operation
from safemigrate.state import Direction, RunState


class Migration:
    """Base class for guarded migrations.

    Subclass and implement ``up`` (and usually ``down``)::

        class AddPlanToUsers(Migration):
            version = 20240101120000

            def up(self):
                self.add_column("users", "plan", "string")

    Each instance is one run: it owns the ``RunState`` and the cached
    database context. The first unsafe operation raises
    ``UnsafeOperationError`` and nothing after it executes.
    """

    version: int | None = None
    schema_load = False

    def __init__(
        self,
        executor: Executor,
        provider: DatabaseContextProvider,
        *,
        guard: SafetyGuard | None = None,
        config: Config | None = None,
    ) -> None:
        self.executor = executor
        self.db = DatabaseContext(provider)
        self.guard = guard or SafetyGuard(config)
        self.state = RunState(
            version=self.version,
            migration_name=type(self).__name__,
            schema_load=self.schema_load,
        )

    def up(self) -> None:
        raise NotImplementedError

    def down(self) -> None:
        raise NotImplementedError

    def migrate(self, direction: Direction | str = Direction.UP) -> None:
        self.state.direction = Direction(direction)
        if self.state.direction is Direction.UP:
            self.up()
        else:
            self.down()

    def safety_assured(self) -> AbstractContextManager[None]:
        """Suspend checks for operations inside the ``with`` block."""
        return self.state.safety_assured()

    def run(self, op: Operation) -> Any:
        return self.guard.apply(op, self.state, self.db, self.executor)

    # ── Schema calls ──────────────────────────────────────────────────

    def create_table(self, table: str, **options: Any) -> Any:
        return self.run(ops.create_table(table, **options))

    def change_table(self, table: str, **options: Any) -> Any:
        return self.run(ops.change_table(table, **options))

    def rename_table(self, table: str, new_name: str) -> Any:
        return self.run(ops.rename_table(table, new_name))

    def add_column(self, table: str, column: str, type: str, **options: Any) -> Any:
        return self.run(ops.add_column(table, column, type, **options))

    def change_column_type(self, table: str, column: str, type: str, **options: Any) -> Any:
        return self.run(ops.change_column_type(table, column, type, **options))

    def change_column_null(self, table: str, column: str, null: bool, default: Any = None) -> Any:
        return self.run(ops.change_column_null(table, column, null, default))

    def change_column_default(self, table: str, column: str, default: Any) -> Any:
        # Not a guarded kind; forwarded as-is.
        return self.run(Operation("change_column_default", table, (column, default)))

    def rename_column(self, table: str, old: str, new: str) -> Any:
        return self.run(ops.rename_column(table, old, new))

    def drop_column(self, table: str, column: str, type: str | None = None, **options: Any) -> Any:
        return self.run(ops.drop_column(table, column, type, **options))

    def drop_columns(self, table: str, *columns: str) -> Any:
        return self.run(ops.drop_columns(table, *columns))

    def drop_timestamps(self, table: str, **options: Any) -> Any:
        return self.run(ops.drop_timestamps(table, **options))

    def add_index(self, table: str, columns: str | list[str], **options: Any) -> Any:
        return self.run(ops.add_index(table, columns, **options))

    def add_reference(self, table: str, ref: str, **options: Any) -> Any:
        return self.run(ops.add_reference(table, ref, **options))

    def add_belongs_to(self, table: str, ref: str, **options: Any) -> Any:
        return self.run(ops.add_belongs_to(table, ref, **options))

    def drop_reference(self, table: str, ref: str, **options: Any) -> Any:
        return self.run(ops.drop_reference(table, ref, **options))

    def drop_belongs_to(self, table: str, ref: str, **options: Any) -> Any:
        return self.run(ops.drop_belongs_to(table, ref, **options))

    def execute(self, sql: str) -> Any:
        return self.run(ops.execute(sql))


class Schema(Migration):
    """A full schema load; replaying a known-good schema is never checked."""

    schema_load = True
