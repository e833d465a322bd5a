"""Default message templates, keyed by rule key.

Templates use ``%(name)s`` placeholders. Any other ``%`` is literal.
"""

from __future__ import annotations

MISSING_MESSAGE = "Missing message"

DEFAULT_MESSAGES: dict[str, str] = {
    "drop_column": """Application code caches the column list of each model, which causes errors
when a column is removed under a running release. Be sure to ignore the column%(column_suffix)s:

class %(model)s(Model):
    %(code)s

Deploy the code, then wrap this step in a safety_assured() block.

class %(migration_name)s(Migration):
    def up(self):
        with self.safety_assured():
            self.%(command)s""",

    "change_table": """The guard cannot see inside change_table blocks.
Make sure all operations are safe before wrapping the block in safety_assured().""",

    "rename_table": """Renaming a table is dangerous while the application is running.
A safer approach is to:

1. Create a new table
2. Write to both tables
3. Backfill data from the old table to the new table
4. Move reads from the old table to the new table
5. Stop writing to the old table
6. Drop the old table""",

    "rename_column": """Renaming a column is dangerous while the application is running.
A safer approach is to:

1. Create a new column
2. Write to both columns
3. Backfill data from the old column to the new column
4. Move reads from the old column to the new column
5. Stop writing to the old column
6. Drop the old column""",

    "add_index_columns": """Adding an index with more than three columns rarely improves performance.
Instead, start an index with the columns that narrow down the results the most.""",

    "add_index": """Adding an index non-concurrently locks the table for writes. Instead, use:

class %(migration_name)s(Migration):
    atomic = False

    def up(self):
        self.add_index(%(table)s, %(column)s, algorithm="concurrently"%(options)s)""",

    "add_column_default": """Adding a column with a non-null default rewrites the entire table on this
database. Instead, add the column without a default value, then change the default.

class %(migration_name)s(Migration):
    def up(self):
        self.add_column(%(table)s, %(column)s, %(type)s%(options)s)
        self.change_column_default(%(table)s, %(column)s, %(default)s)

    def down(self):
        self.drop_column(%(table)s, %(column)s)

Then backfill the existing rows in batches, outside a transaction.

class Backfill%(migration_name)s(Migration):
    atomic = False

    def up(self):
        %(code)s""",

    "add_column_json": """There's no equality operator for the json column type, which causes errors
for existing SELECT DISTINCT queries. Use jsonb instead.""",

    "add_column_json_legacy": """There's no equality operator for the json column type, which causes errors
for existing SELECT DISTINCT queries.
Replace all calls to %(model)s.objects.distinct() with
%(model)s.objects.distinct_on('%(table)s.id').""",

    "change_column": """Changing the type of an existing column requires the entire table and its
indexes to be rewritten, under an exclusive lock. Verify the change manually
and wrap it in safety_assured() only if it is known to be metadata-only.""",

    "create_table": """The force option destroys an existing table and all of its data.
Make sure all data is backed up, then drop the table in its own step.""",

    "add_reference": """Adding an index non-concurrently locks the table for writes. Instead, use:

class %(migration_name)s(Migration):
    atomic = False

    def up(self):
        self.%(command)s(%(table)s, %(reference)s, index=False%(options)s)
        self.add_index(%(table)s, %(column)s, algorithm="concurrently")""",

    "execute": """The guard has no way to check raw SQL.
Make sure your SQL is safe before wrapping it in safety_assured().""",

    "change_column_null": """Passing a default value to change_column_null runs a single UPDATE over the
whole table while the column is locked. Instead, backfill in batches first:

class %(migration_name)s(Migration):
    atomic = False

    def up(self):
        %(code)s
        self.change_column_null(%(table)s, %(column)s, False)""",
}
