"""Text normalization shared by the trend analytics."""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import lru_cache
from typing import AbstractSet, Any, FrozenSet, List


_PUNCT_RE = re.compile(r"[^\w\s]", re.UNICODE)
_SPACE_RE = re.compile(r"\s+")


def _field(event: Any, name: str) -> str:
    if isinstance(event, Mapping):
        value = event.get(name)
    else:
        value = getattr(event, name, None)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def event_title(event: Any) -> str:
    return _field(event, "title")


def event_source(event: Any) -> str:
    return _field(event, "source")


def event_text(event: Any) -> str:
    """Title and content of an event joined by a space; missing fields are ''."""
    return f"{_field(event, 'title')} {_field(event, 'content')}"


def event_blob(event: Any) -> str:
    """Lower-cased `event_text`, the form every substring test runs against."""
    return event_text(event).lower()


def normalize_query(query: str) -> str:
    return _SPACE_RE.sub(" ", (query or "").lower()).strip()


def strip_punctuation(text: str) -> str:
    return _PUNCT_RE.sub(" ", text or "")


def title_tokens(title: str, stopwords: AbstractSet[str]) -> List[str]:
    toks = strip_punctuation((title or "").lower()).split()
    return [t for t in toks if len(t) > 2 and t not in stopwords]


def bigrams(tokens: List[str]) -> List[str]:
    return [f"{a} {b}" for a, b in zip(tokens, tokens[1:])]


@lru_cache(maxsize=32)
def _marker_re(markers: FrozenSet[str]) -> "re.Pattern[str]":
    # ASCII markers match whole words only ("bug" must not fire on "debug");
    # Japanese has no word spacing, so those stay plain substrings.
    parts = []
    for m in sorted(markers, key=len, reverse=True):
        if not m:
            continue
        if m.isascii():
            parts.append(rf"(?<!\w){re.escape(m)}(?!\w)")
        else:
            parts.append(re.escape(m))
    return re.compile("|".join(parts) or r"(?!)")


def contains_any(blob: str, markers: AbstractSet[str]) -> bool:
    return bool(blob) and _marker_re(frozenset(markers)).search(blob) is not None


def count_containing(events, needle: str) -> int:
    """Number of events whose title or content contains `needle` (case-insensitive)."""
    n = (needle or "").lower()
    if not n:
        return 0
    return sum(1 for e in events if n in event_blob(e))
