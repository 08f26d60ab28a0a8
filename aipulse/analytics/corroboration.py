"""Cross-source corroboration for a single keyword."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Sequence, Set

from aipulse.analytics.text_utils import event_blob, event_source


MIN_CORROBORATING_MENTIONS = 3


@dataclass(frozen=True)
class CorroborationResult:
    keyword: str
    sources: FrozenSet[str]
    count: int


def detect_multi_source_mentions(
    events: Sequence,
    keyword: str,
    min_sources: int = 2,
) -> Optional[CorroborationResult]:
    """Report `keyword` when at least `min_sources` distinct sources mention it
    and the total number of mentioning events reaches the floor."""
    needle = (keyword or "").lower()
    if not needle:
        return None

    sources: Set[str] = set()
    count = 0
    for e in events:
        if needle in event_blob(e):
            count += 1
            sources.add(event_source(e))

    if len(sources) >= min_sources and count >= MIN_CORROBORATING_MENTIONS:
        return CorroborationResult(keyword=keyword, sources=frozenset(sources), count=count)
    return None
