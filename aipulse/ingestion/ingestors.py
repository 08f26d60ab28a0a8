"""Ingestors for AI news and community sources (free, no auth).

- RSS: vendor blogs (official) and IT media
- Reddit: hot posts of AI subreddits (community voices)
- Hacker News: Algolia search API (community voices)
- Hugging Face: model discussion threads (community voices)
- GitHub: open issues of AI SDK repos (community voices)

Everything is normalized into `Event` for the event store.
"""

from __future__ import annotations

import re
from calendar import timegm
from dataclasses import dataclass, field
from datetime import datetime, timezone
from html import unescape
from typing import Any, List, Optional, Sequence, Tuple

import feedparser
import requests

from aipulse.ingestion.event_types import Event


USER_AGENT = "AI-Pulse/2.0 (trend digest)"
REQUEST_TIMEOUT = 30
CONTENT_LIMIT = 1000

_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")


def _clean_html(text: Optional[str]) -> str:
    if not text:
        return ""
    return _SPACE_RE.sub(" ", unescape(_TAG_RE.sub(" ", text))).strip()[:CONTENT_LIMIT]


def _parse_dt(dt: Any) -> Optional[datetime]:
    if not dt:
        return None
    if isinstance(dt, datetime):
        return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    if isinstance(dt, (int, float)):
        return datetime.fromtimestamp(dt, tz=timezone.utc)
    s = str(dt).strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class BaseIngestor:
    name: str = "base"

    def fetch(self, *, limit: int = 100) -> List[Event]:
        raise NotImplementedError


@dataclass(frozen=True)
class RSSIngestor(BaseIngestor):
    """Generic RSS ingestor for a list of (source, feed_url, source_type)."""

    feeds: Sequence[Tuple[str, str, str]]
    name: str = "rss"

    def fetch(self, *, limit: int = 100) -> List[Event]:
        out: List[Event] = []
        for source, feed_url, source_type in self.feeds:
            parsed = feedparser.parse(feed_url, agent=USER_AGENT)
            for entry in (parsed.entries or [])[: max(0, limit)]:
                title = entry.get("title")
                if not title:
                    continue
                stamp = entry.get("published_parsed") or entry.get("updated_parsed")
                out.append(
                    Event(
                        title=str(title).strip(),
                        content=_clean_html(entry.get("summary")),
                        source=source,
                        created_at=datetime.fromtimestamp(timegm(stamp), tz=timezone.utc) if stamp else None,
                        url=entry.get("link"),
                        source_type=source_type,
                    )
                )
        return out


@dataclass(frozen=True)
class RedditIngestor(BaseIngestor):
    subreddits: Sequence[str] = field(default_factory=lambda: ("MachineLearning", "LocalLLaMA", "OpenAI", "singularity"))
    name: str = "reddit"

    def fetch(self, *, limit: int = 50) -> List[Event]:
        out: List[Event] = []
        for sub in self.subreddits:
            resp = requests.get(
                f"https://www.reddit.com/r/{sub}/hot.json",
                params={"limit": min(max(limit, 1), 100)},
                headers={"User-Agent": USER_AGENT},
                timeout=REQUEST_TIMEOUT,
            )
            resp.raise_for_status()
            children = ((resp.json() or {}).get("data") or {}).get("children") or []
            for child in children:
                post = (child or {}).get("data") or {}
                title = (post.get("title") or "").strip()
                if not title:
                    continue
                out.append(
                    Event(
                        title=title,
                        content=(post.get("selftext") or "")[:CONTENT_LIMIT],
                        source=f"reddit/{sub}",
                        created_at=_parse_dt(post.get("created_utc")),
                        url=f"https://www.reddit.com{post.get('permalink', '')}",
                        source_type="community",
                    )
                )
        return out


@dataclass(frozen=True)
class HackerNewsIngestor(BaseIngestor):
    keywords: Sequence[str] = field(default_factory=lambda: ("LLM", "GPT", "Claude", "Gemini", "OpenAI", "Anthropic"))
    endpoint: str = "https://hn.algolia.com/api/v1/search_by_date"
    name: str = "hackernews"

    def fetch(self, *, limit: int = 50) -> List[Event]:
        out: List[Event] = []
        seen = set()
        for kw in self.keywords:
            resp = requests.get(
                self.endpoint,
                params={"query": kw, "tags": "story", "hitsPerPage": min(max(limit, 1), 100)},
                headers={"User-Agent": USER_AGENT},
                timeout=REQUEST_TIMEOUT,
            )
            resp.raise_for_status()
            for hit in (resp.json() or {}).get("hits") or []:
                oid = hit.get("objectID")
                title = (hit.get("title") or "").strip()
                if not title or oid in seen:
                    continue
                seen.add(oid)
                out.append(
                    Event(
                        title=title,
                        content=_clean_html(hit.get("story_text")),
                        source="hackernews",
                        created_at=_parse_dt(hit.get("created_at")),
                        url=hit.get("url") or f"https://news.ycombinator.com/item?id={oid}",
                        source_type="community",
                    )
                )
        return out


@dataclass(frozen=True)
class HuggingFaceIngestor(BaseIngestor):
    """Discussion threads on popular Hub model pages."""

    models: Sequence[str] = field(
        default_factory=lambda: (
            "meta-llama/Llama-3.1-8B-Instruct",
            "mistralai/Mistral-7B-Instruct-v0.3",
            "Qwen/Qwen2.5-7B-Instruct",
            "deepseek-ai/DeepSeek-R1",
        )
    )
    name: str = "huggingface"

    def fetch(self, *, limit: int = 10) -> List[Event]:
        out: List[Event] = []
        for model in self.models:
            resp = requests.get(
                f"https://huggingface.co/api/models/{model}/discussions",
                headers={"User-Agent": USER_AGENT},
                timeout=REQUEST_TIMEOUT,
            )
            resp.raise_for_status()
            payload = resp.json() or {}
            # The Hub wraps the list as {"discussions": [...]}; older responses were a bare list.
            discussions = (payload.get("discussions") or []) if isinstance(payload, dict) else payload
            for d in discussions[: max(0, limit)]:
                title = (d.get("title") or "").strip()
                if not title:
                    continue
                num = d.get("num") or d.get("id")
                out.append(
                    Event(
                        title=title,
                        content=(d.get("content") or "")[:CONTENT_LIMIT],
                        source="huggingface",
                        created_at=_parse_dt(d.get("createdAt")),
                        url=f"https://huggingface.co/{model}/discussions/{num}",
                        source_type="community",
                    )
                )
        return out


@dataclass(frozen=True)
class GitHubIssuesIngestor(BaseIngestor):
    """Recently updated open issues of AI SDK / runtime repos (pull requests excluded)."""

    repos: Sequence[str] = field(
        default_factory=lambda: (
            "openai/openai-python",
            "anthropics/anthropic-sdk-python",
            "ollama/ollama",
            "vllm-project/vllm",
        )
    )
    token: Optional[str] = None
    name: str = "github"

    def fetch(self, *, limit: int = 20) -> List[Event]:
        headers = {"Accept": "application/vnd.github+json", "User-Agent": USER_AGENT}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        out: List[Event] = []
        for repo in self.repos:
            resp = requests.get(
                f"https://api.github.com/repos/{repo}/issues",
                params={"state": "open", "sort": "updated", "per_page": min(max(limit, 1), 100)},
                headers=headers,
                timeout=REQUEST_TIMEOUT,
            )
            resp.raise_for_status()
            for issue in resp.json() or []:
                if issue.get("pull_request"):
                    continue
                title = (issue.get("title") or "").strip()
                if not title:
                    continue
                out.append(
                    Event(
                        title=title,
                        content=(issue.get("body") or "")[:CONTENT_LIMIT],
                        source=f"github/{repo}",
                        created_at=_parse_dt(issue.get("created_at")),
                        url=issue.get("html_url"),
                        source_type="community",
                    )
                )
        return out


def default_rss_feeds() -> List[Tuple[str, str, str]]:
    """Media feeds first (updated daily), vendor blogs after."""
    return [
        ("itmedia", "https://rss.itmedia.co.jp/rss/2.0/ait.xml", "media"),
        ("codezine", "https://codezine.jp/rss/new/20/index.xml", "media"),
        ("techcrunch", "https://techcrunch.com/feed/", "media"),
        ("theverge", "https://www.theverge.com/rss/index.xml", "media"),
        ("openai", "https://openai.com/blog/rss.xml", "official"),
        ("anthropic", "https://www.anthropic.com/news/rss", "official"),
        ("google-deepmind", "https://deepmind.google/discover/blog/rss.xml", "official"),
        ("microsoft-ai", "https://blogs.microsoft.com/ai/feed/", "official"),
    ]
