"""Postgres-backed event store.

Raw events (official/media) and user voices (community) live in two tables of
the same shape; search-console rows live in `search_queries`.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Sequence

import psycopg

from aipulse.ingestion.event_types import Event, SearchQuery


logger = logging.getLogger(__name__)

EVENT_TABLES = ("raw_events", "user_voices")


def event_hash(ev: Event) -> str:
    """Stable identity for dedup: the URL when there is one, else source + title."""
    basis = (ev.url or "").strip().lower() or f"{ev.source}\n{(ev.title or '').strip().lower()}"
    return hashlib.sha256(basis.encode("utf-8")).hexdigest()


@dataclass
class PostgresEventStore:
    pg_dsn: str

    def _connect(self):
        return psycopg.connect(self.pg_dsn)

    def _query_window(self, table: str, window_start: datetime, window_end: datetime) -> List[Event]:
        if table not in EVENT_TABLES:
            raise ValueError(f"unknown event table: {table}")
        sql = f"""
        SELECT title, content, source, COALESCE(published_at, created_at), url, source_type
        FROM {table}
        WHERE COALESCE(published_at, created_at) >= %s
          AND COALESCE(published_at, created_at) < %s
        ORDER BY COALESCE(published_at, created_at) DESC
        """
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (window_start, window_end))
                rows = cur.fetchall()
        return [
            Event(title=title or "", content=content or "", source=source or "unknown",
                  created_at=ts, url=url, source_type=source_type)
            for (title, content, source, ts, url, source_type) in rows
        ]

    def query_events(self, window_start: datetime, window_end: datetime) -> List[Event]:
        return self._query_window("raw_events", window_start, window_end)

    def query_voices(self, window_start: datetime, window_end: datetime) -> List[Event]:
        return self._query_window("user_voices", window_start, window_end)

    def query_search_queries(self, since: date) -> List[SearchQuery]:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT query, clicks, impressions, date
                    FROM search_queries
                    WHERE date >= %s
                    ORDER BY clicks DESC
                    """,
                    (since,),
                )
                rows = cur.fetchall()
        return [SearchQuery(query=q, clicks=int(c or 0), impressions=int(i or 0), day=d) for (q, c, i, d) in rows]

    def _insert(self, table: str, events: Sequence[Event]) -> int:
        if not events:
            return 0
        inserted = 0
        with psycopg.connect(self.pg_dsn, autocommit=True) as conn:
            with conn.cursor() as cur:
                for ev in events:
                    if not (ev.title or "").strip():
                        continue
                    cur.execute(
                        f"""
                        INSERT INTO {table} (event_hash, title, content, source, source_type, url, published_at)
                        VALUES (%s, %s, %s, %s, %s, %s, %s)
                        ON CONFLICT (event_hash) DO NOTHING
                        """,
                        (event_hash(ev), ev.title.strip(), ev.content or "", ev.source, ev.source_type, ev.url, ev.created_at),
                    )
                    inserted += cur.rowcount or 0
        logger.info("Inserted %d/%d rows into %s", inserted, len(events), table)
        return inserted

    def insert_events(self, events: Sequence[Event]) -> int:
        return self._insert("raw_events", events)

    def insert_voices(self, events: Sequence[Event]) -> int:
        return self._insert("user_voices", events)

    def insert_search_queries(self, rows: Iterable[SearchQuery]) -> int:
        n = 0
        with psycopg.connect(self.pg_dsn, autocommit=True) as conn:
            with conn.cursor() as cur:
                for r in rows:
                    if not r.query or r.day is None:
                        continue
                    cur.execute(
                        """
                        INSERT INTO search_queries (query, date, clicks, impressions)
                        VALUES (%s, %s, %s, %s)
                        ON CONFLICT (query, date) DO UPDATE SET
                          clicks = EXCLUDED.clicks,
                          impressions = EXCLUDED.impressions
                        """,
                        (r.query, r.day, int(r.clicks), int(r.impressions)),
                    )
                    n += 1
        return n
