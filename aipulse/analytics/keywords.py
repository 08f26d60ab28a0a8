"""Keyword candidate extraction.

Three independent strategies feed the trend detector:

- search-query seeded: tokens of queries people actually click on
- model names: vendor naming patterns, see `aipulse.analytics.model_names`
- title bigrams: generic two-word phrases from headlines

Each strategy returns its own `CandidateSet` subclass. The subclass carries
the minimum current-window count a candidate must reach before the detector
will report it; noisier strategies need more evidence.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import ClassVar, Dict, Iterable, List, Optional, Sequence, Tuple

from aipulse.analytics.lexicon import TrendLexicon, default_lexicon
from aipulse.analytics.model_names import find_model_mentions, superseded_names
from aipulse.analytics.text_utils import (
    bigrams,
    count_containing,
    event_text,
    event_title,
    normalize_query,
    title_tokens,
)


MIN_QUERY_CLICKS = 3
MIN_BIGRAM_CANDIDATE_COUNT = 3


@dataclass(frozen=True)
class KeywordCandidate:
    keyword: str
    current_count: int
    previous_count: int


@dataclass(frozen=True)
class CandidateSet:
    candidates: Tuple[KeywordCandidate, ...] = ()

    strategy: ClassVar[str] = "base"
    min_current_count: ClassVar[int] = 1

    def __len__(self) -> int:
        return len(self.candidates)

    def __iter__(self):
        return iter(self.candidates)


@dataclass(frozen=True)
class SearchQueryCandidates(CandidateSet):
    strategy: ClassVar[str] = "search_query"
    min_current_count: ClassVar[int] = 1


@dataclass(frozen=True)
class ModelNameCandidates(CandidateSet):
    strategy: ClassVar[str] = "model_name"
    min_current_count: ClassVar[int] = 3


@dataclass(frozen=True)
class TitleBigramCandidates(CandidateSet):
    strategy: ClassVar[str] = "title_bigram"
    min_current_count: ClassVar[int] = 5


def _query_field(q, name: str):
    if isinstance(q, dict):
        return q.get(name)
    return getattr(q, name, None)


def aggregate_query_clicks(search_queries: Iterable) -> Dict[str, int]:
    clicks: Dict[str, int] = {}
    for q in search_queries or []:
        key = normalize_query(_query_field(q, "query") or "")
        if not key:
            continue
        clicks[key] = clicks.get(key, 0) + int(_query_field(q, "clicks") or 0)
    return clicks


def search_query_candidates(
    current_events: Sequence,
    previous_events: Sequence,
    search_queries: Iterable,
) -> SearchQueryCandidates:
    tokens: List[str] = []
    for query, clicks in aggregate_query_clicks(search_queries).items():
        if clicks < MIN_QUERY_CLICKS:
            continue
        for tok in query.split():
            if len(tok) > 2 and tok not in tokens:
                tokens.append(tok)

    return SearchQueryCandidates(
        candidates=tuple(
            KeywordCandidate(
                keyword=tok,
                current_count=count_containing(current_events, tok),
                previous_count=count_containing(previous_events, tok),
            )
            for tok in tokens
        )
    )


def _count_model_mentions(events: Sequence, lexicon: TrendLexicon):
    counts: Counter = Counter()
    mentions = []
    for e in events:
        found = find_model_mentions(event_text(e), lexicon.model_patterns)
        mentions.extend(found)
        counts.update(m.name for m in found)
    return counts, mentions


def model_name_candidates(
    current_events: Sequence,
    previous_events: Sequence,
    *,
    lexicon: Optional[TrendLexicon] = None,
) -> ModelNameCandidates:
    lex = lexicon or default_lexicon()
    current, current_mentions = _count_model_mentions(current_events, lex)
    previous, _ = _count_model_mentions(previous_events, lex)
    dropped = superseded_names(current_mentions)

    # Counter preserves first-seen order, which keeps output deterministic.
    return ModelNameCandidates(
        candidates=tuple(
            KeywordCandidate(keyword=name, current_count=n, previous_count=previous.get(name, 0))
            for name, n in current.items()
            if name not in dropped
        )
    )


def count_title_bigrams(events: Sequence, stopwords) -> Counter:
    counts: Counter = Counter()
    for e in events:
        counts.update(bigrams(title_tokens(event_title(e), stopwords)))
    return counts


def title_bigram_candidates(
    current_events: Sequence,
    previous_events: Sequence,
    *,
    lexicon: Optional[TrendLexicon] = None,
) -> TitleBigramCandidates:
    lex = lexicon or default_lexicon()
    current = count_title_bigrams(current_events, lex.stopwords)
    previous = count_title_bigrams(previous_events, lex.stopwords)
    return TitleBigramCandidates(
        candidates=tuple(
            KeywordCandidate(keyword=phrase, current_count=n, previous_count=previous.get(phrase, 0))
            for phrase, n in current.items()
            if n >= MIN_BIGRAM_CANDIDATE_COUNT
        )
    )


def extract_candidate_sets(
    current_events: Sequence,
    previous_events: Sequence,
    search_queries: Optional[Iterable] = None,
    *,
    lexicon: Optional[TrendLexicon] = None,
) -> List[CandidateSet]:
    """All strategies in merge order; search queries are skipped when absent."""
    sets: List[CandidateSet] = []
    if search_queries is not None:
        sets.append(search_query_candidates(current_events, previous_events, search_queries))
    sets.append(model_name_candidates(current_events, previous_events, lexicon=lexicon))
    sets.append(title_bigram_candidates(current_events, previous_events, lexicon=lexicon))
    return sets
