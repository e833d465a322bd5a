"""Database context - adapter family and server version, fetched lazily once per run."""

from __future__ import annotations

from enum import Enum
from typing import Protocol

POSTGRES_ADAPTERS = frozenset({"postgresql", "postgis", "postgres"})


class AdapterFamily(str, Enum):
    POSTGRES = "postgres"
    OTHER = "other"

    @classmethod
    def from_adapter_name(cls, name: str) -> AdapterFamily:
        return cls.POSTGRES if name.lower() in POSTGRES_ADAPTERS else cls.OTHER


class DatabaseContextProvider(Protocol):
    """Minimal interface onto a connected database session."""

    def adapter_name(self) -> str: ...

    def server_version_num(self) -> int: ...

    def column_type(self, table: str, column: str) -> str | None: ...


def version_code(major: int, minor: int = 0, patch: int = 0) -> int:
    """Encode a server version the way Postgres ``server_version_num`` does.

    Examples:
        11.0 -> 110000
        11.4 -> 110004
        9.6.2 -> 90602
    """
    if major >= 10:
        return major * 10000 + minor
    return major * 10000 + minor * 100 + patch


class DatabaseContext:
    """Read-only view of database capabilities for one migration run.

    The provider is queried at most once per value; later lookups hit the
    cache. Rules that never ask for the server version never cause a
    round trip for it.
    """

    def __init__(self, provider: DatabaseContextProvider) -> None:
        self._provider = provider
        self._adapter_family: AdapterFamily | None = None
        self._server_version: int | None = None
        self._column_types: dict[tuple[str, str], str | None] = {}

    @property
    def adapter_family(self) -> AdapterFamily:
        if self._adapter_family is None:
            self._adapter_family = AdapterFamily.from_adapter_name(self._provider.adapter_name())
        return self._adapter_family

    @property
    def is_postgres(self) -> bool:
        return self.adapter_family is AdapterFamily.POSTGRES

    @property
    def server_version(self) -> int:
        if self._server_version is None:
            self._server_version = int(self._provider.server_version_num())
        return self._server_version

    def column_type(self, table: str, column: str) -> str | None:
        key = (table, column)
        if key not in self._column_types:
            self._column_types[key] = self._provider.column_type(table, column)
        return self._column_types[key]


class StaticContextProvider:
    """Provider with fixed answers, for offline checks and tests."""

    def __init__(
        self,
        adapter: str = "postgresql",
        server_version: int = 0,
        columns: dict[tuple[str, str], str] | None = None,
    ) -> None:
        self.adapter = adapter
        self.server_version = server_version
        self.columns = dict(columns or {})

    def adapter_name(self) -> str:
        return self.adapter

    def server_version_num(self) -> int:
        return self.server_version

    def column_type(self, table: str, column: str) -> str | None:
        return self.columns.get((table, column))
