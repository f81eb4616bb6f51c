"""Multi-value cell splitter.

Spreadsheet cells often list several identifiers, separated by commas,
semicolons or pipes depending on who authored the document.
"""
from __future__ import annotations

import re

from crosswalk.core.constants import MULTI_VALUE_SEPARATORS

_SEPARATOR_PATTERN = re.compile(f"[{re.escape(MULTI_VALUE_SEPARATORS)}]")


def split_multi_value(raw: str | None) -> list[str]:
    """Split *raw* on ``,`` ``;`` or ``|`` and return trimmed, non-empty parts.

    Source order is preserved and duplicates are kept.  ``None``, ``""`` and
    whitespace-only input return ``[]``.

    >>> split_multi_value("a, b;c|d")
    ['a', 'b', 'c', 'd']
    """
    if not raw or not raw.strip():
        return []
    return [part.strip() for part in _SEPARATOR_PATTERN.split(raw) if part.strip()]
