"""Example: catching dangerous schema changes before they run.

Each migration call goes through the guard. Safe calls are forwarded to
the executor; the first dangerous one stops the run with a diagnostic
that includes replacement code.

Usage:
    python examples/01_guarded_migration.py
"""

import logging

from safemigrate import (
    Config,
    Migration,
    OperationKind,
    StaticContextProvider,
    UnsafeOperationError,
)


class PrintingExecutor:
    """Stands in for the real migration executor."""

    def apply(self, operation):
        print(f"  applied: {operation.command()}")


# ── Migrations ───────────────────────────────────────────────────────


class CreateAccounts(Migration):
    version = 20240301090000

    def up(self):
        self.create_table("accounts")
        self.add_column("accounts", "email", "string")
        # accounts is new in this run, so a blocking index build is fine
        self.add_index("accounts", "email", unique=True)


class AddPlanToAccounts(Migration):
    version = 20240302090000

    def up(self):
        self.add_column("accounts", "plan", "string", default="free")


class RemoveLegacyFlag(Migration):
    version = 20240303090000

    def up(self):
        with self.safety_assured():
            self.drop_column("accounts", "legacy_flag")


# ── Organization policy ──────────────────────────────────────────────


def no_unreviewed_truncate(context, kind, arguments):
    if kind is OperationKind.EXECUTE and "TRUNCATE" in arguments[0].upper():
        return "TRUNCATE needs a second reviewer."


def main():
    logging.basicConfig(level=logging.INFO)
    config = Config(auto_analyze=True, checks=[no_unreviewed_truncate])
    legacy_postgres = StaticContextProvider("PostgreSQL", 90600)

    for migration_cls in (CreateAccounts, AddPlanToAccounts, RemoveLegacyFlag):
        print(f"{migration_cls.__name__}:")
        migration = migration_cls(PrintingExecutor(), legacy_postgres, config=config)
        try:
            migration.migrate()
        except UnsafeOperationError as exc:
            print(exc)


if __name__ == "__main__":
    main()
