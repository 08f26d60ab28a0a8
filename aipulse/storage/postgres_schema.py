"""Postgres schema management for AI Pulse.

Schema creation is idempotent (CREATE IF NOT EXISTS), so every job calls
`ensure_postgres_schema` on startup.
"""

from __future__ import annotations

from typing import Iterable, Optional

import psycopg


SCHEMA_STATEMENTS: list[str] = [
    # Official / media items
    """
    CREATE TABLE IF NOT EXISTS raw_events (
      id BIGSERIAL PRIMARY KEY,
      event_hash TEXT NOT NULL UNIQUE,
      title TEXT NOT NULL,
      content TEXT NOT NULL DEFAULT '',
      source TEXT NOT NULL,
      source_type TEXT,
      url TEXT,
      published_at TIMESTAMPTZ,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_raw_events_created_at ON raw_events (created_at DESC);",
    # Community posts (Reddit, HN, ...)
    """
    CREATE TABLE IF NOT EXISTS user_voices (
      id BIGSERIAL PRIMARY KEY,
      event_hash TEXT NOT NULL UNIQUE,
      title TEXT NOT NULL,
      content TEXT NOT NULL DEFAULT '',
      source TEXT NOT NULL,
      source_type TEXT,
      url TEXT,
      published_at TIMESTAMPTZ,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_user_voices_created_at ON user_voices (created_at DESC);",
    # Search console export rows
    """
    CREATE TABLE IF NOT EXISTS search_queries (
      query TEXT NOT NULL,
      date DATE NOT NULL,
      clicks INTEGER NOT NULL DEFAULT 0,
      impressions INTEGER NOT NULL DEFAULT 0,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      PRIMARY KEY (query, date)
    );
    """,
    # One row per detected signal; trend_type in keyword|mention_count|sentiment|multi_source
    """
    CREATE TABLE IF NOT EXISTS trends (
      id BIGSERIAL PRIMARY KEY,
      keyword TEXT NOT NULL,
      trend_type TEXT NOT NULL,
      value INTEGER NOT NULL DEFAULT 0,
      previous_value INTEGER,
      growth_rate REAL,
      sources TEXT[],
      window_start TIMESTAMPTZ NOT NULL,
      window_end TIMESTAMPTZ NOT NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      UNIQUE (keyword, trend_type, window_start, window_end)
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_trends_created_at ON trends (created_at DESC);",
    """
    CREATE TABLE IF NOT EXISTS blog_ideas (
      id BIGSERIAL PRIMARY KEY,
      title TEXT NOT NULL,
      summary TEXT NOT NULL DEFAULT '',
      content TEXT NOT NULL DEFAULT '',
      priority TEXT NOT NULL DEFAULT 'medium', -- high|medium|low
      status TEXT NOT NULL DEFAULT 'draft',
      model_used TEXT,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_blog_ideas_created_at ON blog_ideas (created_at DESC);",
]


def ensure_postgres_schema(pg_dsn: str, *, statements: Optional[Iterable[str]] = None) -> None:
    """Ensure Postgres schema exists."""
    stmts = list(statements) if statements is not None else SCHEMA_STATEMENTS
    with psycopg.connect(pg_dsn, autocommit=True) as conn:
        with conn.cursor() as cur:
            for s in stmts:
                cur.execute(s)
