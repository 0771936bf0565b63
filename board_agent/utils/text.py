"""General-purpose text helpers."""
from __future__ import annotations

from typing import Iterable, List


def clamp_text(text: str, limit: int) -> str:
    """Clamp ``text`` to at most ``limit`` characters."""
    if len(text) <= limit:
        return text
    remaining = len(text) - limit
    return text[:limit] + f"\n\n...<truncated {remaining} chars>"


def dedupe_labels(labels: Iterable[str]) -> List[str]:
    """Strip labels and drop blanks and repeats, keeping first occurrences."""
    seen = set()
    result: List[str] = []
    for label in labels:
        tag = str(label).strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def split_labels(value: str) -> List[str]:
    """Parse a comma-separated label list typed by the user."""
    return dedupe_labels(value.split(","))


__all__ = ["clamp_text", "dedupe_labels", "split_labels"]
