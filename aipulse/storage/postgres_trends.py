"""Persist trend reports and blog ideas in Postgres."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

import psycopg

from aipulse.analytics.report import TrendReport


MENTION_COUNT_KEYWORD = "__all__"

_UPSERT_TREND = """
INSERT INTO trends (keyword, trend_type, value, previous_value, growth_rate, sources, window_start, window_end)
VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
ON CONFLICT (keyword, trend_type, window_start, window_end) DO UPDATE SET
  value = EXCLUDED.value,
  previous_value = EXCLUDED.previous_value,
  growth_rate = EXCLUDED.growth_rate,
  sources = EXCLUDED.sources,
  created_at = now()
"""


TrendRow = Tuple[str, str, int, Optional[int], Optional[float], Optional[List[str]]]


def trend_rows(report: TrendReport) -> List[TrendRow]:
    """Flatten a report into (keyword, trend_type, value, previous_value, growth_rate, sources)."""
    rows: List[TrendRow] = [
        (t.keyword, "keyword", int(t.current_count), None, float(t.growth_rate), None)
        for t in report.trends
    ]
    if report.mention_shift_significant:
        rows.append((
            MENTION_COUNT_KEYWORD,
            "mention_count",
            int(report.current_mentions),
            int(report.previous_mentions),
            float(report.mention_growth_rate),
            None,
        ))
    s = report.sentiment_trend
    if s is not None:
        rows.append((s.sentiment, "sentiment", int(s.current_count), int(s.previous_count), float(s.growth_rate), None))
    for c in report.corroborated:
        rows.append((c.keyword, "multi_source", int(c.count), None, None, sorted(c.sources)))
    return rows


def store_trend_report(
    pg_dsn: str,
    report: TrendReport,
    *,
    window_start: datetime,
    window_end: datetime,
) -> int:
    rows = trend_rows(report)
    if not rows:
        return 0
    with psycopg.connect(pg_dsn, autocommit=True) as conn:
        with conn.cursor() as cur:
            for row in rows:
                cur.execute(_UPSERT_TREND, (*row, window_start, window_end))
    return len(rows)


def store_blog_ideas(pg_dsn: str, ideas: Sequence, *, model_used: Optional[str] = None) -> int:
    """Insert ideas; each idea's own `model_used` wins over the `model_used` default."""
    if not ideas:
        return 0
    with psycopg.connect(pg_dsn, autocommit=True) as conn:
        with conn.cursor() as cur:
            for idea in ideas:
                cur.execute(
                    """
                    INSERT INTO blog_ideas (title, summary, content, priority, model_used)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (idea.title, idea.summary, idea.content, idea.priority, getattr(idea, "model_used", None) or model_used),
                )
    return len(ideas)
