"""Rising-keyword detection over two adjacent time windows.

We compute simple, explainable trend scores:
- growth = week-over-week percentage change of a keyword's mention count
    (see `aipulse.analytics.growth.calculate_trend`)
- candidates come from three extraction strategies, each with its own
  minimum current count (see `aipulse.analytics.keywords`)
- the whole-corpus mention count gets the same growth treatment as a coarse
  "is overall volume shifting" signal
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set

from aipulse.analytics.growth import calculate_trend
from aipulse.analytics.keywords import extract_candidate_sets
from aipulse.analytics.lexicon import TrendLexicon


DEFAULT_MIN_GROWTH_RATE = 50.0
MAX_TRENDS = 30
MENTION_SHIFT_THRESHOLD = 10.0


@dataclass(frozen=True)
class TrendResult:
    keyword: str
    growth_rate: float
    current_count: int


def rank_trends(trends: Iterable[TrendResult], *, top_k: int = MAX_TRENDS) -> List[TrendResult]:
    ranked = sorted(trends, key=lambda t: (-t.growth_rate, -t.current_count))
    return ranked[:top_k]


def detect_rising_keywords(
    current_events: Sequence,
    previous_events: Sequence,
    search_queries: Optional[Iterable] = None,
    min_growth_rate: float = DEFAULT_MIN_GROWTH_RATE,
    *,
    lexicon: Optional[TrendLexicon] = None,
    top_k: int = MAX_TRENDS,
) -> List[TrendResult]:
    trends: List[TrendResult] = []
    seen: Set[str] = set()

    for candidate_set in extract_candidate_sets(
        current_events, previous_events, search_queries, lexicon=lexicon
    ):
        floor = max(1, candidate_set.min_current_count)
        for c in candidate_set:
            key = c.keyword.lower()
            if key in seen:
                continue
            growth = calculate_trend(c.current_count, c.previous_count)
            if growth < min_growth_rate or c.current_count < floor:
                continue
            seen.add(key)
            trends.append(TrendResult(keyword=c.keyword, growth_rate=growth, current_count=c.current_count))

    return rank_trends(trends, top_k=top_k)


def mention_count_trend(current_events: Sequence, previous_events: Sequence) -> float:
    return calculate_trend(len(current_events), len(previous_events))


def is_significant_mention_shift(growth_rate: float) -> bool:
    return abs(growth_rate) > MENTION_SHIFT_THRESHOLD
