from __future__ import annotations
from typing import Any, List


def ensure_list(obj: Any) -> List[Any]:
    """Ensure object is a list. If None, return empty list. If already list, return as-is."""
    if obj is None:
        return []
    if isinstance(obj, list):
        return obj
    return [obj]


def clean_strings(items: List[Any]) -> List[str]:
    """Strip entries and drop the empty ones, preserving order."""
    out: List[str] = []
    for item in ensure_list(items):
        s = str(item).strip()
        if s:
            out.append(s)
    return out
