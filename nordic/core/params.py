"""SQL parameter handling.

``rewrite_named_params`` converts ``:name`` templates to ``$n`` positional SQL,
expanding list values into one placeholder per element.
``normalize_placeholders`` converts ``$n`` SQL to the binding style a driver
expects. Both skip single-quoted string literals and PostgreSQL
``::typecast`` syntax.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from nordic.core.enums import ParamStyle
from nordic.core.exceptions import ParameterBindingError
from nordic.core.query import ParameterizedQuery, placeholder

# Matches :name but not ::typecast and not inside words
# Negative lookbehind for : (handles ::), \w (handles mid-word colons)
_PARAM_PATTERN = re.compile(r"(?<![:\w]):(\w+)")

# Matches $n positional placeholders
_POSITIONAL_PATTERN = re.compile(r"\$(\d+)")

# Matches standard-conforming single-quoted literals; '' is the only escape
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^']|'')*'")


@lru_cache(maxsize=256)
def _split_literals(sql: str) -> tuple[tuple[bool, str], ...]:
    """Split *sql* into ``(is_literal, text)`` segments."""
    parts: list[tuple[bool, str]] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append((False, sql[last_end:start]))
        parts.append((True, match.group()))
        last_end = end

    if last_end < len(sql):
        parts.append((False, sql[last_end:]))

    return tuple(parts)


def rewrite_named_params(
    template: str,
    named_values: Mapping[str, Any] | None = None,
) -> ParameterizedQuery:
    """Rewrite a ``:name`` template into ``$n`` SQL and an aligned value tuple.

    Tokens are numbered in order of appearance from ``$1``. A list or tuple
    value expands to one comma-separated placeholder per element, so a
    template should read ``IN (:names)``. Every occurrence of a name binds
    its own placeholders and values.

    Args:
        template: SQL text with ``:name`` tokens.
        named_values: Values by name.

    Raises:
        ParameterBindingError: If a token has no entry in *named_values*.
    """
    named_values = named_values or {}
    values: list[Any] = []

    def _bind(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in named_values:
            raise ParameterBindingError(name, template)
        value = named_values[name]
        items = list(value) if isinstance(value, (list, tuple)) else [value]
        start = len(values) + 1
        values.extend(items)
        return ", ".join(placeholder(start + offset) for offset in range(len(items)))

    parts = [
        text if is_literal else _PARAM_PATTERN.sub(_bind, text)
        for is_literal, text in _split_literals(template)
    ]
    return ParameterizedQuery("".join(parts), tuple(values))


def normalize_placeholders(
    query: ParameterizedQuery,
    paramstyle: ParamStyle | str,
) -> tuple[str, tuple[Any, ...]]:
    """Convert a ``$n`` query to *paramstyle*.

    * ``numeric``: unchanged.
    * ``qmark``: ``$n`` -> ``?n`` (SQLite numbered parameters).
    * ``format``: ``$n`` -> ``%s`` with values re-ordered by occurrence, and
      literal ``%`` doubled (psycopg).

    Returns:
        Tuple of (sql, params) ready for the driver.
    """
    style = ParamStyle(paramstyle)
    if style is ParamStyle.NUMERIC:
        return query.text, query.values
    if style is ParamStyle.QMARK:
        return _to_qmark(query.text), query.values

    ordered: list[Any] = []

    def _format(match: re.Match[str]) -> str:
        ordered.append(query.values[int(match.group(1)) - 1])
        return "%s"

    parts: list[str] = []
    for is_literal, text in _split_literals(query.text):
        escaped = text.replace("%", "%%")
        parts.append(escaped if is_literal else _POSITIONAL_PATTERN.sub(_format, escaped))
    return "".join(parts), tuple(ordered)


@lru_cache(maxsize=256)
def _to_qmark(sql: str) -> str:
    """Convert $n params to ?n, preserving string literals."""
    return "".join(
        text if is_literal else _POSITIONAL_PATTERN.sub(r"?\1", text)
        for is_literal, text in _split_literals(sql)
    )
