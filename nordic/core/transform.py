"""Result row key transforms applied after execution."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

KeyTransform = Callable[[str], str]

_WORD_SPLIT = re.compile(r"[_\-\s]+")


def to_camel_case(key: str) -> str:
    """``article_id`` -> ``articleId``."""
    words = [word for word in _WORD_SPLIT.split(key) if word]
    if not words:
        return key
    head, *tail = words
    return head.lower() + "".join(word.capitalize() for word in tail)


def transform_row_keys(
    rows: Iterable[Mapping[str, Any]],
    transform: KeyTransform | None = None,
) -> list[dict[str, Any]]:
    """Return copies of *rows* with every key passed through *transform*."""
    if transform is None:
        return [dict(row) for row in rows]
    return [{transform(key): value for key, value in row.items()} for row in rows]
