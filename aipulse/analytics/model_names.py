"""Model-name detection from free text.

New model families appear constantly, so names are found with an ordered
registry of per-vendor patterns (`aipulse.analytics.lexicon.ModelPattern`)
instead of a maintained allow-list. Callers only see
`extract_model_mentions(text) -> [(family, normalized_name)]`.

A final catch-all pattern picks up word-hyphen-version names nobody has
registered yet, using the prefix as the family.

Superseded-version filtering is a heuristic tuned on two vendor naming schemes
(GPT's "-o" refresh and Claude's ".5" point releases). It compares integer
major versions within a family and nothing more.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from aipulse.analytics.lexicon import DEFAULT_MODEL_PATTERNS, ModelPattern


_SEP_RE = re.compile(r"[-\s]+")
_GLUED_RE = re.compile(r"^([a-z]+)(\d.*)$")


@dataclass(frozen=True)
class ModelMention:
    family: str
    name: str
    version: Optional[str] = None
    variant: Optional[str] = None

    @property
    def major(self) -> Optional[int]:
        if not self.version:
            return None
        try:
            return int(self.version.split(".")[0])
        except ValueError:
            return None

    @property
    def is_refreshed(self) -> bool:
        """True for a refreshed sub-variant of a generation (gpt-4o, claude 3.5)."""
        if self.variant and self.variant.lower() == "o":
            return True
        parts = (self.version or "").split(".")
        return len(parts) > 1 and parts[1] == "5"


@lru_cache(maxsize=64)
def _compile(pattern: str) -> "re.Pattern[str]":
    return re.compile(pattern, re.IGNORECASE)


def normalize_model_name(raw: str, display: Optional[str] = None) -> str:
    """'gpt 4o mini' -> 'GPT-4o-mini' (with display='GPT'), 'foo-9' -> 'Foo-9'."""
    segments = [s for s in _SEP_RE.split((raw or "").strip().lower()) if s]
    if not segments:
        return ""
    glued = _GLUED_RE.match(segments[0])
    if glued:
        segments[0:1] = [glued.group(1), glued.group(2)]
    segments[0] = display or segments[0].capitalize()
    return "-".join(segments)


def find_model_mentions(
    text: str,
    patterns: Sequence[ModelPattern] = DEFAULT_MODEL_PATTERNS,
) -> List[ModelMention]:
    """Every model name in `text`, in registry order.

    A stretch of text already claimed by an earlier pattern is not matched
    again, so the generic catch-all never double counts a registered name.
    """
    if not text:
        return []
    out: List[ModelMention] = []
    claimed: List[Tuple[int, int]] = []
    for mp in patterns:
        for m in _compile(mp.pattern).finditer(text):
            start, end = m.span()
            if any(start < c_end and c_start < end for c_start, c_end in claimed):
                continue
            groups = m.groupdict()
            family = mp.family or (groups.get("family") or "").lower()
            if not family:
                continue
            claimed.append((start, end))
            out.append(
                ModelMention(
                    family=family,
                    name=normalize_model_name(m.group(0), mp.display),
                    version=groups.get("version"),
                    variant=groups.get("variant"),
                )
            )
    return out


def extract_model_mentions(
    text: str,
    patterns: Sequence[ModelPattern] = DEFAULT_MODEL_PATTERNS,
) -> List[Tuple[str, str]]:
    return [(m.family, m.name) for m in find_model_mentions(text, patterns)]


def superseded_names(mentions: Iterable[ModelMention]) -> Set[str]:
    """Names made obsolete by a newer generation of the same family.

    Two or more generations behind the family's latest: always superseded.
    One generation behind: superseded unless it is a refreshed sub-variant.
    Mentions without a parsable version are never superseded.
    """
    by_family: Dict[str, List[ModelMention]] = {}
    for m in mentions:
        if m.major is not None:
            by_family.setdefault(m.family, []).append(m)

    out: Set[str] = set()
    for family_mentions in by_family.values():
        latest = max(m.major for m in family_mentions)
        for m in family_mentions:
            gap = latest - m.major
            if gap >= 2 or (gap == 1 and not m.is_refreshed):
                out.add(m.name)
    return out
