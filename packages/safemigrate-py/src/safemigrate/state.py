"""RunState - mutable per-run state consulted by the guard."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass
class RunState:
    """State of one migration run.

    ``new_tables`` only ever grows, and only with tables whose
    ``create_table`` passed the guard.
    """

    direction: Direction = Direction.UP
    override_active: bool = False
    new_tables: set[str] = field(default_factory=set)
    version: int | None = None
    migration_name: str = "Migration"
    schema_load: bool = False

    @contextmanager
    def safety_assured(self) -> Iterator[None]:
        """Suspend all checks for the dynamic extent of the block.

        The previous flag value is restored on every exit path, so nested
        blocks unwind correctly.
        """
        previous = self.override_active
        self.override_active = True
        try:
            yield
        finally:
            self.override_active = previous

    def record_new_table(self, table: str) -> None:
        self.new_tables.add(table)

    def is_grandfathered(self, start_after: int) -> bool:
        return self.version is not None and self.version <= start_after
