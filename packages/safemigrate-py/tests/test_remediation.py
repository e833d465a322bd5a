"""Tests for safemigrate.remediation - template rendering and suggested code."""

import pytest

from safemigrate.messages import DEFAULT_MESSAGES, MISSING_MESSAGE
from safemigrate.remediation import (
    backfill_code,
    column_literal,
    ignore_columns_code,
    lookup_template,
    model_name,
    options_literal,
    quote_table_name,
    render_message,
)


class TestRenderMessage:
    def test_substitutes_placeholders(self):
        assert render_message("Drop %(table)s", {"table": "'users'"}) == "Drop 'users'"

    def test_literal_percent_in_template(self):
        out = render_message("Locks 100% of %(table)s", {"table": "'users'"})
        assert out == "Locks 100% of 'users'"

    def test_percent_followed_by_s_is_literal(self):
        assert render_message("%s and %d", {}) == "%s and %d"

    def test_percent_in_variable_not_reinterpreted(self):
        out = render_message("Default %(default)s", {"default": "'50%(x)s'"})
        assert out == "Default '50%(x)s'"

    def test_unknown_placeholder_raises(self):
        with pytest.raises(KeyError):
            render_message("%(nope)s", {})


class TestLookupTemplate:
    def test_default(self):
        assert lookup_template("rename_table") == DEFAULT_MESSAGES["rename_table"]

    def test_override(self):
        assert lookup_template("rename_table", {"rename_table": "No."}) == "No."

    def test_missing(self):
        assert lookup_template("nope") == MISSING_MESSAGE


class TestLiterals:
    def test_single_column_list_collapses(self):
        assert column_literal(["email"]) == "'email'"

    def test_column_list(self):
        assert column_literal(["a", "b"]) == "['a', 'b']"

    def test_scalar_column(self):
        assert column_literal("email") == "'email'"

    def test_options(self):
        assert options_literal({"unique": True, "name": "idx"}) == ", unique=True, name='idx'"

    def test_no_options(self):
        assert options_literal({}) == ""

    def test_quote_table_name(self):
        assert quote_table_name("users") == '"users"'
        assert quote_table_name("public.users") == '"public"."users"'


class TestSnippets:
    def test_model_name(self):
        assert model_name("order_items") == "OrderItem"

    def test_backfill_is_batched(self):
        code = backfill_code("User", "plan", "free")
        assert code == "User.objects.in_batches(size=1000).update(plan='free')"

    def test_backfill_batch_size(self):
        assert "in_batches(size=250)" in backfill_code("User", "plan", "free", batch_size=250)

    def test_backfill_non_literal_default_repr(self):
        assert backfill_code("User", "score", 0).endswith("update(score=0)")

    def test_backfill_non_identifier_column(self):
        code = backfill_code("User", "plan-type", "free")
        assert code.endswith("update(**{'plan-type': 'free'})")

    def test_backfill_keyword_column(self):
        code = backfill_code("Course", "class", "A")
        assert code.endswith("update(**{'class': 'A'})")

    def test_ignore_columns(self):
        assert ignore_columns_code(["legacy"]) == "ignored_columns = ['legacy']"
