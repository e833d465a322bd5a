"""Remediation generator - diagnostic text and suggested replacement code."""

from __future__ import annotations

import keyword
import re
from typing import Any, Mapping

from safemigrate._naming import table_to_model
from safemigrate.messages import DEFAULT_MESSAGES, MISSING_MESSAGE

# "%" that does not open a "%(name)" placeholder
_LITERAL_PERCENT_RE = re.compile(r"%(?!\()")


def render_message(template: str, variables: Mapping[str, Any]) -> str:
    """Interpolate ``variables`` into ``template``.

    Literal percent signs in the template are escaped first so only
    ``%(name)s`` placeholders are substituted. Values are never re-parsed.
    """
    return _LITERAL_PERCENT_RE.sub("%%", template) % dict(variables)


def lookup_template(key: str, overrides: Mapping[str, str] | None = None) -> str:
    if overrides and key in overrides:
        return overrides[key]
    return DEFAULT_MESSAGES.get(key, MISSING_MESSAGE)


# ── Literals ─────────────────────────────────────────────────────────


def name_literal(value: Any) -> str:
    return repr(str(value))


def column_literal(columns: Any) -> str:
    """Render a column or column list; single-element lists collapse to a scalar."""
    if isinstance(columns, (list, tuple)):
        names = [str(c) for c in columns]
        if len(names) == 1:
            return repr(names[0])
        return repr(names)
    return repr(str(columns))


def options_literal(options: Mapping[str, Any]) -> str:
    """Render keyword options as ``, key=value`` pairs (empty when none)."""
    return "".join(f", {k}={v!r}" for k, v in options.items())


def quote_table_name(table: str) -> str:
    return ".".join(f'"{part}"' for part in table.split("."))


# ── Code snippets ────────────────────────────────────────────────────


def model_name(table: str) -> str:
    return table_to_model(table)


def backfill_code(model: str, column: str, default: Any, *, batch_size: int = 1000) -> str:
    """Batched update setting ``column`` to ``default`` on every row of ``model``.

    Example:
        User.objects.in_batches(size=1000).update(plan='free')
    """
    if str(column).isidentifier() and not keyword.iskeyword(str(column)):
        assignment = f"{column}={default!r}"
    else:
        assignment = f"**{{{str(column)!r}: {default!r}}}"
    return f"{model}.objects.in_batches(size={batch_size}).update({assignment})"


def ignore_columns_code(columns: list[str]) -> str:
    """Declarative exclusion the application applies before a column is dropped."""
    return f"ignored_columns = {columns!r}"
