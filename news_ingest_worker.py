#!/usr/bin/env python3
"""Multi-source ingestion worker.

Runs one ingestion cycle (or scheduled) to ingest:
- RSS feeds (vendor blogs + IT media) into raw_events
- Reddit, Hacker News, Hugging Face and GitHub posts into user_voices
- search-console CSV exports dropped in SEARCH_CONSOLE_EXPORT_DIR into search_queries

A failing source is logged and skipped; the others still land.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from datetime import date, timedelta
from pathlib import Path
from typing import List, Sequence

import schedule
from dotenv import load_dotenv

from aipulse.ingestion.event_types import Event
from aipulse.ingestion.ingestors import (
    BaseIngestor,
    GitHubIssuesIngestor,
    HackerNewsIngestor,
    HuggingFaceIngestor,
    RedditIngestor,
    RSSIngestor,
    default_rss_feeds,
)
from aipulse.ingestion.search_console import load_search_console_csv
from aipulse.storage.postgres_events import PostgresEventStore, event_hash
from aipulse.storage.postgres_schema import ensure_postgres_schema


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

DEFAULT_PG_DSN = "dbname=aipulse user=aipulse password=aipulsepass host=localhost port=5432"


def _dedupe(items: Sequence[Event]) -> List[Event]:
    seen = set()
    out = []
    for it in items:
        h = event_hash(it)
        if h in seen:
            continue
        seen.add(h)
        out.append(it)
    return out


def collect(ingestors: Sequence[BaseIngestor], *, limit: int) -> List[Event]:
    items: List[Event] = []
    for ing in ingestors:
        try:
            fetched = ing.fetch(limit=limit)
        except Exception:
            logger.exception("[%s] source failed; continuing", ing.name)
            continue
        logger.info("[%s] fetched %d items", ing.name, len(fetched))
        items.extend(fetched)
    return _dedupe(items)


def import_search_queries(store: PostgresEventStore, export_dir: str, *, day: date) -> int:
    """Load every CSV in `export_dir` and move the loaded files into `processed/`.

    Undated exports are stamped with `day`; moving them keeps a later cycle
    from stamping the same rows with a different day.
    """
    src = Path(export_dir)
    files = sorted(src.glob("*.csv"))
    if not files:
        return 0
    rows = []
    for p in files:
        rows.extend(load_search_console_csv(p, day=day))
    n = store.insert_search_queries(rows)
    done = src / "processed"
    done.mkdir(exist_ok=True)
    for p in files:
        p.rename(done / p.name)
    return n


def run_once() -> None:
    load_dotenv()
    pg_dsn = os.environ.get("PG_DSN", DEFAULT_PG_DSN)
    ensure_postgres_schema(pg_dsn)
    store = PostgresEventStore(pg_dsn)

    events = collect([RSSIngestor(default_rss_feeds())], limit=50)
    voices = collect(
        [
            RedditIngestor(),
            HackerNewsIngestor(),
            HuggingFaceIngestor(),
            GitHubIssuesIngestor(token=os.environ.get("GITHUB_TOKEN") or None),
        ],
        limit=50,
    )

    n_events = store.insert_events(events)
    n_voices = store.insert_voices(voices)
    logger.info("[ingest] raw_events=%d user_voices=%d", n_events, n_voices)

    export_dir = os.environ.get("SEARCH_CONSOLE_EXPORT_DIR")
    if export_dir:
        # Performance exports cover the previous full day.
        n_queries = import_search_queries(store, export_dir, day=date.today() - timedelta(days=1))
        logger.info("[ingest] search_queries=%d", n_queries)


def _run_safely() -> None:
    try:
        run_once()
    except Exception:
        logger.exception("Ingestion cycle failed")


def run_scheduled() -> None:
    # Every 30 minutes: lightweight ingestion
    schedule.every(30).minutes.do(_run_safely)
    while True:
        schedule.run_pending()
        time.sleep(5)


if __name__ == "__main__":
    mode = (os.environ.get("INGEST_MODE") or "once").lower().strip()
    if mode in ("scheduled", "daemon"):
        run_scheduled()
    else:
        run_once()
