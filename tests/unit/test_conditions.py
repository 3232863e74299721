"""Unit tests for ConditionCompiler."""

from __future__ import annotations

import re

import pytest

from nordic.core.conditions import (
    SET_OPTIONS,
    ConditionCompiler,
    ConditionOptions,
    Scalar,
    ValueList,
    compile_conditions,
    resolve_value,
)
from nordic.core.enums import ValueExpressionMode


def _indices(text: str) -> list[int]:
    return [int(m) for m in re.findall(r"\$(\d+)", text)]


class TestResolveValue:
    def test_scalar(self) -> None:
        assert resolve_value(1) == Scalar(1)

    def test_none_is_scalar(self) -> None:
        assert resolve_value(None) == Scalar(None)

    def test_string_is_scalar(self) -> None:
        assert resolve_value("abc") == Scalar("abc")

    def test_list(self) -> None:
        assert resolve_value([1, 2]) == ValueList((1, 2))

    def test_tuple(self) -> None:
        assert resolve_value((1, 2)) == ValueList((1, 2))


class TestConditionCompiler:
    def test_single_scalar(self) -> None:
        result = ConditionCompiler().compile({"article_id": 1})
        assert result.text == "article_id = $1"
        assert result.values == (1,)

    def test_multiple_scalars(self) -> None:
        result = ConditionCompiler().compile({"article_id": 1, "title": "x"})
        assert result.text == "article_id = $1 AND title = $2"
        assert result.values == (1, "x")

    def test_list_value(self) -> None:
        result = ConditionCompiler().compile({"title": ["a", "b", "c"]})
        assert result.text == "title IN ($1, $2, $3)"
        assert result.values == ("a", "b", "c")

    def test_mixed_values_keep_contiguous_numbering(self) -> None:
        result = ConditionCompiler().compile({"a": 1, "b": [2, 3], "c": 4})
        assert result.text == "a = $1 AND b IN ($2, $3) AND c = $4"
        assert result.values == (1, 2, 3, 4)

    def test_index_offset(self) -> None:
        options = ConditionOptions(index_offset=3)
        result = ConditionCompiler().compile({"a": 1, "b": [2, 3]}, options)
        assert result.text == "a = $4 AND b IN ($5, $6)"
        assert result.values == (1, 2, 3)

    def test_custom_separator_without_space(self) -> None:
        options = ConditionOptions(separator=",", separator_space_before=False)
        result = ConditionCompiler().compile({"a": 1, "b": 2}, options)
        assert result.text == "a = $1, b = $2"

    def test_or_separator(self) -> None:
        options = ConditionOptions(separator="OR")
        result = ConditionCompiler().compile({"a": 1, "b": 2}, options)
        assert result.text == "a = $1 OR b = $2"

    def test_empty_conditions(self) -> None:
        result = ConditionCompiler().compile({})
        assert result.text == ""
        assert result.values == ()

    def test_none_conditions(self) -> None:
        result = ConditionCompiler().compile(None)
        assert result.text == ""
        assert result.values == ()

    def test_key_order_is_preserved(self) -> None:
        result = ConditionCompiler().compile({"z": 1, "a": 2})
        assert result.text == "z = $1 AND a = $2"
        assert result.values == (1, 2)

    def test_placeholder_count_matches_values(self) -> None:
        conditions = {"a": [1, 2, 3], "b": "x", "c": [], "d": [4], "e": None}
        result = ConditionCompiler().compile(conditions, ConditionOptions(index_offset=2))
        assert result.placeholder_count == len(result.values)
        assert _indices(result.text) == list(range(3, 3 + len(result.values)))

    def test_compiling_twice_is_identical(self) -> None:
        compiler = ConditionCompiler()
        conditions = {"a": 1, "b": [2, 3]}
        assert compiler.compile(conditions) == compiler.compile(conditions)


class TestMappedExpressions:
    def test_mapping_applied_in_mapped_mode(self) -> None:
        mapping = {"geom": lambda source, ph: f"ST_GeomFromText({ph})"}
        result = ConditionCompiler(mapping).compile({"title": "x", "geom": "POINT(1 1)"}, SET_OPTIONS)
        assert result.text == "title = $1, geom = ST_GeomFromText($2)"
        assert result.values == ("x", "POINT(1 1)")

    def test_mapping_ignored_in_placeholder_mode(self) -> None:
        mapping = {"geom": lambda source, ph: f"ST_GeomFromText({ph})"}
        result = ConditionCompiler(mapping).compile({"geom": "POINT(1 1)"})
        assert result.text == "geom = $1"

    def test_mapping_receives_source_and_placeholder(self) -> None:
        calls: list[tuple[dict, str]] = []

        def _record(source, ph):
            calls.append((dict(source), ph))
            return ph

        conditions = {"a": 1, "b": 2}
        ConditionCompiler({"b": _record}).compile(conditions, SET_OPTIONS)
        assert calls == [({"a": 1, "b": 2}, "$2")]

    def test_mapping_applied_per_list_element(self) -> None:
        mapping = {"id": lambda source, ph: f"{ph}::int"}
        options = ConditionOptions(value_expression_mode=ValueExpressionMode.MAPPED)
        result = ConditionCompiler(mapping).compile({"id": ["1", "2"]}, options)
        assert result.text == "id IN ($1::int, $2::int)"


class TestCompileConditions:
    def test_keyword_options(self) -> None:
        result = compile_conditions({"a": 1, "b": 2}, separator=",", separator_space_before=False)
        assert result.text == "a = $1, b = $2"

    def test_invalid_option_raises(self) -> None:
        with pytest.raises(TypeError):
            compile_conditions({"a": 1}, unknown=True)
