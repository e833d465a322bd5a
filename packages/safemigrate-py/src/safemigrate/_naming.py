"""Naming convention utilities: table name → entity name."""

from __future__ import annotations

import re

_SINGULAR_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(?i)([^aeiouy])ies$"), r"\1y"),
    (re.compile(r"(?i)(ss|sh|ch|x|z)es$"), r"\1"),
    (re.compile(r"(?i)(ss|us)$"), r"\1"),
    (re.compile(r"(?i)s$"), ""),
]


def snake_to_camel(name: str) -> str:
    """Convert snake_case to CamelCase.

    Examples:
        user -> User
        order_item -> OrderItem
    """
    return "".join(part.capitalize() for part in name.split("_"))


def singularize(word: str) -> str:
    """Best-effort English singular for plural table names.

    Examples:
        users -> user
        categories -> category
        addresses -> address
        status -> status
    """
    for pattern, replacement in _SINGULAR_RULES:
        if pattern.search(word):
            return pattern.sub(replacement, word)
    return word


def table_to_model(table: str) -> str:
    """Derive the entity (model class) name bound to a table.

    Only the last snake_case segment is singularized, and any schema
    qualifier is dropped.

    Examples:
        users -> User
        order_items -> OrderItem
        public.categories -> Category
    """
    name = table.rsplit(".", 1)[-1]
    head, _, last = name.rpartition("_")
    singular = singularize(last)
    return snake_to_camel(f"{head}_{singular}" if head else singular)
