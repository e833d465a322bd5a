"""Tests for safemigrate.operations."""

import pytest

from safemigrate.operations import (
    Operation,
    OperationKind,
    add_column,
    add_index,
    add_reference,
    change_column_null,
    drop_column,
    drop_columns,
    execute,
    operation_from_dict,
    rename_column,
)


# ── Builders ─────────────────────────────────────────────────────────


class TestBuilders:
    def test_add_column(self):
        op = add_column("users", "plan", "string", default="free")
        assert op.kind is OperationKind.ADD_COLUMN
        assert op.table == "users"
        assert op.arguments == ("plan", "string")
        assert op.options["default"] == "free"

    def test_drop_column_with_type(self):
        op = drop_column("users", "legacy", "string")
        assert op.arguments == ("legacy", "string")

    def test_drop_columns(self):
        op = drop_columns("users", "a", "b")
        assert op.arguments == ("a", "b")

    def test_execute_has_no_table(self):
        op = execute("SELECT 1")
        assert op.table == ""
        assert op.arguments == ("SELECT 1",)

    def test_change_column_null_keeps_all_positions(self):
        op = change_column_null("users", "plan", False)
        assert op.arguments == ("plan", False, None)


# ── Operation ────────────────────────────────────────────────────────


class TestOperation:
    def test_string_kind_is_normalized(self):
        op = Operation("rename_table", "users", ("people",))
        assert op.kind is OperationKind.RENAME_TABLE

    def test_unknown_kind_kept_as_string(self):
        op = Operation("change_column_default", "users", ("plan", "free"))
        assert op.kind == "change_column_default"
        assert op.name == "change_column_default"

    def test_is_immutable(self):
        op = rename_column("users", "email", "email_address")
        with pytest.raises(AttributeError):
            op.table = "people"  # type: ignore[misc]
        with pytest.raises(TypeError):
            op.options["x"] = 1  # type: ignore[index]

    def test_options_copied_from_caller(self):
        options = {"unique": True}
        op = Operation(OperationKind.ADD_INDEX, "users", ("email",), options)
        options["unique"] = False
        assert op.options["unique"] is True

    def test_equality(self):
        assert add_index("users", ["a", "b"]) == add_index("users", ["a", "b"])

    def test_argument_default(self):
        op = add_reference("posts", "user")
        assert op.argument(0) == "user"
        assert op.argument(3, "missing") == "missing"

    def test_describe(self):
        assert add_index("users", "email").describe() == "Add index on users"
        assert execute("SELECT 1").describe() == "Execute"


# ── command() ────────────────────────────────────────────────────────


class TestCommand:
    def test_plain(self):
        assert drop_column("users", "legacy").command() == "drop_column('users', 'legacy')"

    def test_with_options(self):
        op = add_column("users", "plan", "string", default="free")
        assert op.command() == "add_column('users', 'plan', 'string', default='free')"

    def test_exclude_and_extra(self):
        op = add_index("users", "email", algorithm="inplace", unique=True)
        cmd = op.command(exclude=("algorithm",), algorithm="concurrently")
        assert cmd == "add_index('users', 'email', unique=True, algorithm='concurrently')"

    def test_no_table(self):
        assert execute("SELECT 1").command() == "execute('SELECT 1')"


# ── Serialization ────────────────────────────────────────────────────


class TestSerialization:
    def test_to_dict(self):
        d = add_index("users", ["a", "b"], unique=True).to_dict()
        assert d == {
            "kind": "add_index",
            "table": "users",
            "arguments": [["a", "b"]],
            "options": {"unique": True},
        }

    def test_from_dict_via_registry(self):
        op = add_column("users", "plan", "string", default="free")
        assert operation_from_dict(op.to_dict()) == op

    def test_unknown_kind_survives(self):
        op = operation_from_dict({"kind": "vacuum", "table": "users"})
        assert op.kind == "vacuum"

    def test_missing_kind_raises(self):
        with pytest.raises(ValueError, match="no kind"):
            operation_from_dict({"table": "users"})
