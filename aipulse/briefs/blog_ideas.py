"""Turn a trend report into blog-post ideas.

The LLM is an opaque collaborator: it gets a compact JSON summary of the
report plus recent headlines and must answer with a JSON list of ideas. When
no key is configured, the request fails, or the answer cannot be parsed, we
fall back to deterministic template ideas so the nightly digest never comes
out empty-handed.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Optional, Sequence

import requests

from aipulse.analytics.report import TrendReport
from aipulse.analytics.text_utils import event_source, event_title


logger = logging.getLogger(__name__)

OPENROUTER_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "openai/gpt-4o-mini"
TEMPLATE_MODEL = "template"
PRIORITIES = ("high", "medium", "low")

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


@dataclass(frozen=True)
class BlogIdea:
    title: str
    summary: str = ""
    content: str = ""
    priority: str = "medium"
    model_used: Optional[str] = None


def summarize_report(report: TrendReport, events: Sequence = (), *, max_trends: int = 20, max_events: int = 20) -> Dict[str, Any]:
    s = report.sentiment_trend
    return {
        "trends": [
            {"keyword": t.keyword, "growth_rate": round(t.growth_rate, 1), "mentions": t.current_count}
            for t in report.trends[:max_trends]
        ],
        "mention_growth_rate": round(report.mention_growth_rate, 1),
        "sentiment": asdict(s) if s is not None else None,
        "corroborated": [
            {"keyword": c.keyword, "sources": sorted(c.sources), "count": c.count} for c in report.corroborated
        ],
        "recent_events": [
            {"title": event_title(e), "source": event_source(e)} for e in list(events)[:max_events]
        ],
    }


def _extract_json(raw: str) -> Any:
    text = (raw or "").strip()
    fenced = _FENCE_RE.search(text)
    if fenced:
        text = fenced.group(1)
    # remove trailing commas before ] or }
    text = re.sub(r",(\s*[}\]])", r"\1", text)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def parse_ideas(raw: str) -> List[BlogIdea]:
    data = _extract_json(raw)
    if isinstance(data, dict):
        data = data.get("blog_ideas") or data.get("ideas") or []
    if not isinstance(data, list):
        return []
    out: List[BlogIdea] = []
    for item in data:
        if not isinstance(item, dict) or not str(item.get("title") or "").strip():
            continue
        priority = str(item.get("priority") or "medium").lower()
        out.append(
            BlogIdea(
                title=str(item["title"]).strip(),
                summary=str(item.get("summary") or ""),
                content=str(item.get("content") or ""),
                priority=priority if priority in PRIORITIES else "medium",
            )
        )
    return out


def template_ideas(report: TrendReport, events: Sequence = ()) -> List[BlogIdea]:
    """Fallback: three recent official/media items plus the top two trends."""
    ideas: List[BlogIdea] = []
    for e in [e for e in events if getattr(e, "source_type", None) in ("official", "media")][:3]:
        ideas.append(
            BlogIdea(
                title=event_title(e) or "Official update",
                summary=f"Source: {event_source(e)}",
                content=getattr(e, "content", "") or event_title(e),
                priority="medium",
                model_used=TEMPLATE_MODEL,
            )
        )
    for t in report.trends[:2]:
        ideas.append(
            BlogIdea(
                title=f"{t.keyword} is trending",
                summary=f"Growth: {t.growth_rate:.1f}%",
                content=f"Mentions of {t.keyword} rose to {t.current_count} this week.",
                priority="high" if t.growth_rate > 100 else "medium",
                model_used=TEMPLATE_MODEL,
            )
        )
    return ideas


def request_ideas(summary: Dict[str, Any], *, api_key: str, model: str = DEFAULT_MODEL, timeout: int = 60) -> str:
    resp = requests.post(
        OPENROUTER_API_URL,
        headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
        json={
            "model": model,
            "messages": [
                {
                    "role": "system",
                    "content": "You plan blog posts for an AI news site. Reply with a JSON list of "
                    "objects with keys title, summary, content, priority (high|medium|low).",
                },
                {"role": "user", "content": json.dumps(summary, ensure_ascii=False)},
            ],
            "temperature": 0.5,
        },
        timeout=timeout,
    )
    resp.raise_for_status()
    choices = (resp.json() or {}).get("choices") or [{}]
    return (choices[0].get("message") or {}).get("content") or ""


def generate_blog_ideas(
    report: TrendReport,
    events: Sequence = (),
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> List[BlogIdea]:
    key = api_key if api_key is not None else os.environ.get("OPENROUTER_API_KEY", "").strip()
    if not key:
        logger.info("No OPENROUTER_API_KEY set; using template blog ideas")
        return template_ideas(report, events)

    model = model or os.environ.get("OPENROUTER_MODEL", DEFAULT_MODEL)
    try:
        raw = request_ideas(summarize_report(report, events), api_key=key, model=model)
    except requests.exceptions.RequestException as e:
        logger.warning("Blog idea request failed (%s); using template ideas", e)
        return template_ideas(report, events)

    ideas = parse_ideas(raw)
    if not ideas:
        logger.warning("Could not parse blog ideas from %s response; using template ideas", model)
        return template_ideas(report, events)
    return [replace(i, model_used=model) for i in ideas]
