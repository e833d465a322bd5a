"""Tests for safemigrate._naming - table names to entity names."""

from safemigrate._naming import singularize, snake_to_camel, table_to_model


class TestSnakeToCamel:
    def test_simple(self):
        assert snake_to_camel("user") == "User"

    def test_two_words(self):
        assert snake_to_camel("order_item") == "OrderItem"

    def test_single_char(self):
        assert snake_to_camel("x") == "X"


class TestSingularize:
    def test_plain_s(self):
        assert singularize("users") == "user"

    def test_ies(self):
        assert singularize("categories") == "category"

    def test_sses(self):
        assert singularize("addresses") == "address"

    def test_xes(self):
        assert singularize("boxes") == "box"

    def test_already_singular(self):
        assert singularize("status") == "status"

    def test_no_s(self):
        assert singularize("data") == "data"


class TestTableToModel:
    def test_simple(self):
        assert table_to_model("users") == "User"

    def test_compound(self):
        assert table_to_model("order_items") == "OrderItem"

    def test_schema_qualified(self):
        assert table_to_model("public.categories") == "Category"

    def test_only_last_segment_singularized(self):
        assert table_to_model("news_feeds") == "NewsFeed"
