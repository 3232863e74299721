"""Compiled query value object."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

# Column key -> fn(source mapping, "$n") -> SQL expression wrapping the placeholder
PropertiesMapping = Mapping[str, Callable[[Mapping[str, Any], str], str]]

_PLACEHOLDER_PATTERN = re.compile(r"\$(\d+)")


def placeholder(index: int) -> str:
    """Return the positional placeholder for a 1-based *index*."""
    return f"${index}"


@dataclass(frozen=True)
class ParameterizedQuery:
    """SQL text with ``$n`` placeholders and the values they bind, in order.

    ``$i`` refers to ``values[i - 1]``. Instances unpack as ``text, values``.
    """

    text: str
    values: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))

    def __iter__(self) -> Iterator[Any]:
        yield self.text
        yield self.values

    @property
    def placeholder_count(self) -> int:
        """Number of ``$n`` tokens in the text."""
        return len(_PLACEHOLDER_PATTERN.findall(self.text))

    @property
    def placeholder_indices(self) -> list[int]:
        """Placeholder indices in order of appearance."""
        return [int(m) for m in _PLACEHOLDER_PATTERN.findall(self.text)]
