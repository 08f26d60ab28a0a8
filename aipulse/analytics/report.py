"""Assemble the per-run trend report handed to storage and idea generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from aipulse.analytics.corroboration import CorroborationResult, detect_multi_source_mentions
from aipulse.analytics.lexicon import TrendLexicon
from aipulse.analytics.sentiment import SentimentTrend, analyze_sentiment_trend
from aipulse.analytics.trends import (
    DEFAULT_MIN_GROWTH_RATE,
    TrendResult,
    detect_rising_keywords,
    is_significant_mention_shift,
    mention_count_trend,
)


CORROBORATION_TOP_N = 10


@dataclass(frozen=True)
class TrendReport:
    trends: List[TrendResult]
    mention_growth_rate: float
    sentiment_trend: Optional[SentimentTrend] = None
    corroborated: List[CorroborationResult] = field(default_factory=list)
    current_mentions: int = 0
    previous_mentions: int = 0

    @property
    def mention_shift_significant(self) -> bool:
        return is_significant_mention_shift(self.mention_growth_rate)

    @property
    def is_empty(self) -> bool:
        return (
            not self.trends
            and self.sentiment_trend is None
            and not self.corroborated
            and not self.mention_shift_significant
        )


def build_trend_report(
    current_events: Sequence,
    previous_events: Sequence,
    current_voices: Sequence = (),
    previous_voices: Sequence = (),
    search_queries: Optional[Iterable] = None,
    *,
    min_growth_rate: float = DEFAULT_MIN_GROWTH_RATE,
    corroboration_top_n: int = CORROBORATION_TOP_N,
    min_sources: int = 2,
    lexicon: Optional[TrendLexicon] = None,
) -> TrendReport:
    trends = detect_rising_keywords(
        current_events,
        previous_events,
        search_queries,
        min_growth_rate,
        lexicon=lexicon,
    )

    # The same story often shows up in both streams; corroborate across both.
    pool = list(current_events) + list(current_voices)
    corroborated: List[CorroborationResult] = []
    for t in trends[: max(0, corroboration_top_n)]:
        hit = detect_multi_source_mentions(pool, t.keyword, min_sources=min_sources)
        if hit is not None:
            corroborated.append(hit)

    return TrendReport(
        trends=trends,
        mention_growth_rate=mention_count_trend(current_events, previous_events),
        sentiment_trend=analyze_sentiment_trend(current_voices, previous_voices, lexicon=lexicon),
        corroborated=corroborated,
        current_mentions=len(current_events),
        previous_mentions=len(previous_events),
    )
