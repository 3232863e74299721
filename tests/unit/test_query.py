"""Unit tests for ParameterizedQuery."""

from __future__ import annotations

from nordic.core.query import ParameterizedQuery, placeholder


def test_values_are_stored_as_tuple() -> None:
    query = ParameterizedQuery("SELECT $1", [1])  # type: ignore[arg-type]
    assert query.values == (1,)


def test_unpacking() -> None:
    text, values = ParameterizedQuery("SELECT $1", (1,))
    assert text == "SELECT $1"
    assert values == (1,)


def test_placeholder_helpers() -> None:
    query = ParameterizedQuery("SELECT $1, $2, $10", (1, 2, 3))
    assert query.placeholder_count == 3
    assert query.placeholder_indices == [1, 2, 10]
    assert placeholder(4) == "$4"
