"""Shared ingestion data types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Event:
    """Normalized textual record from any source (news item, forum post, ...).

    Raw events and user voices share this shape. `content` may be empty.
    """

    title: str
    content: str = ""
    source: str = "unknown"
    created_at: Optional[datetime] = None
    url: Optional[str] = None
    source_type: Optional[str] = None  # official | media | community


@dataclass(frozen=True)
class SearchQuery:
    """One row of a search-console export."""

    query: str
    clicks: int = 0
    impressions: int = 0
    day: Optional[date] = None
