"""Shared test fixtures - recording executor and static database contexts."""

from __future__ import annotations

import pytest

from safemigrate.context import DatabaseContext, StaticContextProvider
from safemigrate.operations import Operation
from safemigrate.state import RunState


class RecordingExecutor:
    """Records every operation forwarded to it."""

    def __init__(self) -> None:
        self.applied: list[Operation] = []

    def apply(self, operation: Operation) -> str:
        self.applied.append(operation)
        return "ok"


class CountingProvider(StaticContextProvider):
    """Static provider that counts round trips."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.calls: list[str] = []

    def adapter_name(self) -> str:
        self.calls.append("adapter_name")
        return super().adapter_name()

    def server_version_num(self) -> int:
        self.calls.append("server_version_num")
        return super().server_version_num()

    def column_type(self, table: str, column: str) -> str | None:
        self.calls.append("column_type")
        return super().column_type(table, column)


@pytest.fixture(autouse=True)
def _no_blanket_override(monkeypatch):
    monkeypatch.delenv("SAFETY_ASSURED", raising=False)


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def state() -> RunState:
    return RunState(migration_name="AddPlanToUsers")


@pytest.fixture
def pg11() -> DatabaseContext:
    return DatabaseContext(StaticContextProvider("PostgreSQL", 110000))


@pytest.fixture
def pg96() -> DatabaseContext:
    return DatabaseContext(StaticContextProvider("PostgreSQL", 90600))


@pytest.fixture
def mysql() -> DatabaseContext:
    return DatabaseContext(StaticContextProvider("Mysql2", 80000))
