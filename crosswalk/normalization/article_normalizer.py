"""NIS2 article normalizer.

Article identifiers vary too much between documents ("12.4.1",
"Art 21(2)(d)") to canonicalize safely, so this is a pass-through apart
from trimming.  Extraction always routes article values through here.
"""
from __future__ import annotations


def normalize_article(raw: str | None) -> str:
    """Return *raw* stripped of surrounding whitespace; ``None`` gives ``""``."""
    if not raw:
        return ""
    return raw.strip()
