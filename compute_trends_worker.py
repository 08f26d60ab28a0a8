#!/usr/bin/env python3
"""Nightly trend job.

Reads the current and previous windows of raw events and user voices,
builds a trend report, stores it in Postgres and drafts blog ideas from it.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from datetime import datetime, timedelta, timezone

import schedule
from dotenv import load_dotenv

from aipulse.analytics.report import build_trend_report
from aipulse.briefs.blog_ideas import generate_blog_ideas
from aipulse.storage.postgres_events import PostgresEventStore
from aipulse.storage.postgres_schema import ensure_postgres_schema
from aipulse.storage.postgres_trends import store_blog_ideas, store_trend_report


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

DEFAULT_PG_DSN = "dbname=aipulse user=aipulse password=aipulsepass host=localhost port=5432"
SEARCH_QUERY_LOOKBACK_DAYS = 30


def run_once() -> int:
    load_dotenv()
    pg_dsn = os.environ.get("PG_DSN", DEFAULT_PG_DSN)
    window_days = int(os.environ.get("TREND_WINDOW_DAYS", "7"))
    min_growth = float(os.environ.get("MIN_GROWTH_RATE", "50"))
    ensure_postgres_schema(pg_dsn)
    store = PostgresEventStore(pg_dsn)

    now = datetime.now(timezone.utc)
    window_end = now
    window_start = now - timedelta(days=window_days)
    previous_start = window_start - timedelta(days=window_days)

    current_events = store.query_events(window_start, window_end)
    previous_events = store.query_events(previous_start, window_start)
    current_voices = store.query_voices(window_start, window_end)
    previous_voices = store.query_voices(previous_start, window_start)
    search_queries = store.query_search_queries((now - timedelta(days=SEARCH_QUERY_LOOKBACK_DAYS)).date())

    logger.info(
        "Windows loaded: events=%d/%d voices=%d/%d search_queries=%d",
        len(current_events), len(previous_events), len(current_voices), len(previous_voices), len(search_queries),
    )

    report = build_trend_report(
        current_events,
        previous_events,
        current_voices,
        previous_voices,
        search_queries or None,
        min_growth_rate=min_growth,
    )
    if report.is_empty:
        logger.info("No trend signals this run; skipping persistence")
        return 0

    n_rows = store_trend_report(pg_dsn, report, window_start=window_start, window_end=window_end)
    ideas = generate_blog_ideas(report, current_events + current_voices)
    n_ideas = store_blog_ideas(pg_dsn, ideas)

    logger.info("[trends] stored trend_rows=%d blog_ideas=%d top=%s", n_rows, n_ideas,
                ", ".join(t.keyword for t in report.trends[:5]) or "-")
    return n_rows


def _run_safely() -> None:
    try:
        run_once()
    except Exception:
        logger.exception("Trend run failed")


def run_scheduled() -> None:
    at = os.environ.get("TRENDS_AT", "02:00")
    schedule.every().day.at(at).do(_run_safely)
    logger.info("Trend job scheduled daily at %s", at)
    while True:
        schedule.run_pending()
        time.sleep(30)


def main() -> int:
    mode = (os.environ.get("TRENDS_MODE") or "once").lower().strip()
    if mode in ("scheduled", "daemon"):
        run_scheduled()
    else:
        run_once()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
