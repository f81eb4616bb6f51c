"""ISO/IEC 27001 Annex A normalizer.

Mapping documents write Annex A controls both as ``A.5.9`` and ``A5.9``.
The canonical form always carries the dot after the letter so the two
spellings index to the same key.
"""
from __future__ import annotations

import re

_MISSING_SEPARATOR = re.compile(r"^([A-Za-z])(\d)")


def normalize_annex(raw: str | None) -> str:
    """Return *raw* with a ``.`` inserted between a leading letter and digit.

    ``"A5.9"`` becomes ``"A.5.9"``; ``"A.5.9"`` is returned unchanged.
    Surrounding whitespace is stripped.  Empty or ``None`` input returns
    ``""``.  Idempotent.
    """
    if not raw:
        return ""
    return _MISSING_SEPARATOR.sub(r"\1.\2", raw.strip())
