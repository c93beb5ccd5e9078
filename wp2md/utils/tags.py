from __future__ import annotations

from html import unescape
import re
from typing import Iterable, List, Optional


def _normalize_label(value: Optional[str]) -> str:
    """Unescape HTML entities and collapse inner whitespace.

    Preserves original casing but trims leading/trailing spaces
    and converts sequences of whitespace to a single space.
    """
    if not value:
        return ""
    text = unescape(value).strip()
    # Collapse multiple whitespace to single space
    text = re.sub(r"\s+", " ", text)
    return text


def dedupe_labels(values: Iterable[Optional[str]]) -> List[str]:
    """
    Normalize a sequence of tag labels (category nicenames in the export).

    - Unescapes HTML entities (e.g., '&amp;' -> '&')
    - Trims spaces, collapses inner whitespace
    - Drops empty labels
    - Deduplicates case-insensitively while preserving first-seen casing

    Returns the cleaned labels in first-seen order.
    """
    seen_lower = set()
    result: List[str] = []
    for value in values:
        label = _normalize_label(value)
        key = label.lower()
        if label and key not in seen_lower:
            seen_lower.add(key)
            result.append(label)
    return result
