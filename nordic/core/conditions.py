"""Condition compilation.

Turns a conditions mapping (column -> scalar or list of scalars) into a
clause fragment with ``$n`` placeholders numbered contiguously from
``index_offset + 1``:

    {"article_id": 1, "title": ["a", "b"]}
    -> "article_id = $1 AND title IN ($2, $3)", (1, "a", "b")

The same routine renders ``WHERE`` bodies (``AND``-joined) and ``SET`` lists
(``,``-joined, optionally passing each placeholder through a properties
mapping).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from nordic.core.enums import ValueExpressionMode
from nordic.core.query import ParameterizedQuery, PropertiesMapping, placeholder


@dataclass(frozen=True)
class Scalar:
    """A single value, compiled to ``key = $n``."""

    value: Any


@dataclass(frozen=True)
class ValueList:
    """An ordered list of values, compiled to ``key IN ($n, ...)``."""

    values: tuple[Any, ...]


ConditionValue = Scalar | ValueList


def resolve_value(value: Any) -> ConditionValue:
    """Classify a raw condition value. Lists and tuples are membership lists."""
    if isinstance(value, (list, tuple)):
        return ValueList(tuple(value))
    return Scalar(value)


@dataclass(frozen=True)
class ConditionOptions:
    """Formatting options for a compiled condition list.

    Attributes:
        separator: Keyword joining the fragments (``AND`` for WHERE, ``,`` for SET).
        separator_space_before: Emit a space before the separator.
        index_offset: Placeholders already consumed earlier in the same query.
        value_expression_mode: ``MAPPED`` passes placeholders through the
            properties mapping of the current key.
    """

    separator: str = "AND"
    separator_space_before: bool = True
    index_offset: int = 0
    value_expression_mode: ValueExpressionMode = ValueExpressionMode.PLACEHOLDER

    @property
    def joiner(self) -> str:
        return f"{' ' if self.separator_space_before else ''}{self.separator} "


WHERE_OPTIONS = ConditionOptions()
SET_OPTIONS = ConditionOptions(
    separator=",",
    separator_space_before=False,
    value_expression_mode=ValueExpressionMode.MAPPED,
)


class ConditionCompiler:
    """Compiles conditions mappings into clause fragments.

    Args:
        properties_mapping: Optional column -> expression function mapping,
            consulted only in ``MAPPED`` mode.
    """

    def __init__(self, properties_mapping: PropertiesMapping | None = None) -> None:
        self._properties_mapping: PropertiesMapping = properties_mapping or {}

    def compile(
        self,
        conditions: Mapping[str, Any] | None,
        options: ConditionOptions | None = None,
    ) -> ParameterizedQuery:
        """Compile *conditions* into a ``{text, values}`` fragment.

        Returns an empty fragment for empty or ``None`` conditions.
        """
        options = options or WHERE_OPTIONS
        if not conditions:
            return ParameterizedQuery("", ())

        fragments: list[str] = []
        values: list[Any] = []
        next_index = options.index_offset + 1

        for key, raw in conditions.items():
            condition = resolve_value(raw)
            if isinstance(condition, ValueList):
                expressions = [
                    self._expression(key, conditions, next_index + offset, options)
                    for offset in range(len(condition.values))
                ]
                fragments.append(f"{key} IN ({', '.join(expressions)})")
                values.extend(condition.values)
                next_index += len(condition.values)
            else:
                expression = self._expression(key, conditions, next_index, options)
                fragments.append(f"{key} = {expression}")
                values.append(condition.value)
                next_index += 1

        return ParameterizedQuery(options.joiner.join(fragments), tuple(values))

    def expression(self, key: str, source: Mapping[str, Any], index: int) -> str:
        """Render placeholder *index* for column *key* through the properties mapping."""
        transform = self._properties_mapping.get(key)
        if transform is None:
            return placeholder(index)
        return transform(source, placeholder(index))

    def _expression(
        self,
        key: str,
        source: Mapping[str, Any],
        index: int,
        options: ConditionOptions,
    ) -> str:
        if options.value_expression_mode is ValueExpressionMode.MAPPED:
            return self.expression(key, source, index)
        return placeholder(index)


def compile_conditions(
    conditions: Mapping[str, Any] | None,
    properties_mapping: PropertiesMapping | None = None,
    **options: Any,
) -> ParameterizedQuery:
    """Compile *conditions* with keyword :class:`ConditionOptions`."""
    return ConditionCompiler(properties_mapping).compile(conditions, ConditionOptions(**options))
