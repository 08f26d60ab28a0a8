"""Search-console CSV exports -> SearchQuery rows.

The "Queries" table of a performance export has one row per query and no date
column, so the caller supplies the day the export covers. Exports made with a
date dimension carry their own `Date` column, which wins.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional, Union

from aipulse.ingestion.event_types import SearchQuery


logger = logging.getLogger(__name__)

_QUERY_COLUMNS = ("query", "queries", "top queries", "search query")
_DATE_COLUMNS = ("date", "day")


def _column(header: Dict[str, str], names) -> Optional[str]:
    for n in names:
        if n in header:
            return header[n]
    return None


def _to_int(raw: Optional[str]) -> int:
    s = (raw or "").strip().replace(",", "")
    if not s:
        return 0
    try:
        return int(float(s))
    except ValueError:
        return 0


def parse_search_console_csv(text: str, *, day: Optional[date] = None) -> List[SearchQuery]:
    """Parse an export; rows without a query or without any date are skipped."""
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    if not reader.fieldnames:
        return []
    header = {(f or "").strip().lower(): f for f in reader.fieldnames}
    q_col = _column(header, _QUERY_COLUMNS)
    if q_col is None:
        logger.warning("Search console export has no query column: %s", reader.fieldnames)
        return []
    d_col = _column(header, _DATE_COLUMNS)
    clicks_col = header.get("clicks")
    impressions_col = header.get("impressions")

    out: List[SearchQuery] = []
    for row in reader:
        query = (row.get(q_col) or "").strip()
        if not query:
            continue
        row_day = day
        if d_col and row.get(d_col):
            try:
                row_day = datetime.strptime(row[d_col].strip(), "%Y-%m-%d").date()
            except ValueError:
                continue
        if row_day is None:
            continue
        out.append(
            SearchQuery(
                query=query,
                clicks=_to_int(row.get(clicks_col)) if clicks_col else 0,
                impressions=_to_int(row.get(impressions_col)) if impressions_col else 0,
                day=row_day,
            )
        )
    return out


def load_search_console_csv(path: Union[str, Path], *, day: Optional[date] = None) -> List[SearchQuery]:
    p = Path(path)
    rows = parse_search_console_csv(p.read_text(encoding="utf-8"), day=day)
    logger.info("Loaded %d search queries from %s", len(rows), p.name)
    return rows
