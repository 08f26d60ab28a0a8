"""Directional sentiment shift in community voices.

A keyword-bag classifier, deliberately simple: a post counts as positive if it
contains any positive marker and as negative if it contains any negative
marker. The two tallies are independent, so one post can count toward both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from aipulse.analytics.growth import calculate_trend
from aipulse.analytics.lexicon import TrendLexicon, default_lexicon
from aipulse.analytics.text_utils import contains_any, event_blob


SENTIMENT_SIGNIFICANCE = 20.0

POSITIVE = "positive"
NEGATIVE = "negative"


@dataclass(frozen=True)
class SentimentTrend:
    sentiment: str
    growth_rate: float
    current_count: int
    previous_count: int


def count_sentiment(voices: Sequence, lexicon: Optional[TrendLexicon] = None) -> Tuple[int, int]:
    """Return (positive_count, negative_count) for a window of voices."""
    lex = lexicon or default_lexicon()
    pos = neg = 0
    for v in voices:
        blob = event_blob(v)
        if contains_any(blob, lex.positive_markers):
            pos += 1
        if contains_any(blob, lex.negative_markers):
            neg += 1
    return pos, neg


def analyze_sentiment_trend(
    current_voices: Sequence,
    previous_voices: Sequence,
    *,
    lexicon: Optional[TrendLexicon] = None,
) -> Optional[SentimentTrend]:
    cur_pos, cur_neg = count_sentiment(current_voices, lexicon)
    prev_pos, prev_neg = count_sentiment(previous_voices, lexicon)

    pos_growth = calculate_trend(cur_pos, prev_pos)
    neg_growth = calculate_trend(cur_neg, prev_neg)

    # Positive has to beat negative outright; negative only has to clear the bar.
    if abs(pos_growth) > abs(neg_growth) and abs(pos_growth) > SENTIMENT_SIGNIFICANCE:
        return SentimentTrend(POSITIVE, pos_growth, cur_pos, prev_pos)
    if abs(neg_growth) > SENTIMENT_SIGNIFICANCE:
        return SentimentTrend(NEGATIVE, neg_growth, cur_neg, prev_neg)
    return None
