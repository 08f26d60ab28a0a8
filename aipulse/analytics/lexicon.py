"""Word lists used by the trend analytics.

Everything here is plain data. Callers that need different vocabularies (tests,
other languages) build their own `TrendLexicon` and pass it in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple


STOPWORDS = frozenset({
    "the","a","an","and","or","but","of","to","in","on","for","with","by","at","as","is","are","was","were","be","been","being",
    "this","that","these","those","it","its","from","about","into","over","after","before","between","through","during","without","within",
    "what","who","whom","which","when","where","why","how","can","could","should","would","may","might","will","shall","do","does","did",
    "their","they","them","we","you","your","i","he","she","his","her","our","ours","us",
    "new","now","just","more","most","than","then","not","all","any","has","have","had","here","there","out","get","gets","got",
    "via","vs","one","two","first","says","said","use","using","make","makes","show","hn","ask",
})

POSITIVE_MARKERS = frozenset({
    "great", "amazing", "awesome", "impressive", "excellent", "love", "loving",
    "helpful", "useful", "better", "best", "faster", "improved", "game changer",
    "game-changer", "solid", "incredible", "fantastic", "works well",
    "すごい", "便利", "最高", "良い", "使いやすい",
})

NEGATIVE_MARKERS = frozenset({
    "bad", "worse", "worst", "terrible", "awful", "broken", "buggy", "bug", "bugs",
    "slow", "slower", "disappointed", "disappointing", "hate", "useless",
    "nerfed", "regression", "downgrade", "frustrating", "overpriced",
    "ひどい", "遅い", "使えない", "微妙", "改悪",
})


@dataclass(frozen=True)
class ModelPattern:
    """One vendor naming convention.

    `pattern` must define a `version` group; an optional `variant` group holds
    a suffix glued to the version (the "o" in gpt-4o). `display` overrides the
    capitalized first segment of the normalized name. With `family=None` the
    family id is read from the pattern's own `family` group.
    """

    family: Optional[str]
    pattern: str
    display: Optional[str] = None


# word-hyphen-version ("Foo-9", "Nova-2.1"); prefixes that are usually not models are skipped
GENERIC_MODEL_PATTERN = (
    r"\b(?!(?:top|covid|cve|rfc|utf|sha|ios|macos|android|windows|iphone|pixel|part|page|day|week|year|"
    r"step|level|chapter|episode|season|version|vol|issue|phase|tier|type|class|section)-)"
    r"(?P<family>[a-z]{2,})-(?P<version>\d+(?:\.\d+)?)\b"
)

DEFAULT_MODEL_PATTERNS: Tuple[ModelPattern, ...] = (
    ModelPattern(
        family="gpt",
        pattern=r"\bgpt[-\s]?(?P<version>\d+(?:\.\d+)?)(?P<variant>o)?(?:[-\s](?:mini|nano|turbo|pro))?\b",
        display="GPT",
    ),
    # claude-3.5-sonnet (version first)
    ModelPattern(
        family="claude",
        pattern=r"\bclaude[-\s](?P<version>\d+(?:\.\d+)?)[-\s](?:opus|sonnet|haiku)\b",
    ),
    # claude sonnet 4.5 (tier first)
    ModelPattern(
        family="claude",
        pattern=r"\bclaude[-\s](?:opus|sonnet|haiku)[-\s](?P<version>\d+(?:\.\d+)?)\b",
    ),
    ModelPattern(
        family="gemini",
        pattern=r"\bgemini[-\s](?P<version>\d+(?:\.\d+)?)(?:[-\s](?:pro|flash|ultra|nano))?\b",
    ),
    ModelPattern(family="llama", pattern=r"\bllama[-\s]?(?P<version>\d+(?:\.\d+)?)\b"),
    ModelPattern(family="grok", pattern=r"\bgrok[-\s]?(?P<version>\d+(?:\.\d+)?)\b"),
    ModelPattern(family="qwen", pattern=r"\bqwen[-\s]?(?P<version>\d+(?:\.\d+)?)\b"),
    # V (chat) and R (reasoning) are separate product lines with their own numbering
    ModelPattern(family="deepseek-v", pattern=r"\bdeepseek[-\s]v(?P<version>\d+(?:\.\d+)?)\b", display="DeepSeek"),
    ModelPattern(family="deepseek-r", pattern=r"\bdeepseek[-\s]r(?P<version>\d+(?:\.\d+)?)\b", display="DeepSeek"),
    # Catch-all for names nobody has registered yet (Foo-9); family comes from the prefix.
    ModelPattern(family=None, pattern=GENERIC_MODEL_PATTERN),
)


@dataclass(frozen=True)
class TrendLexicon:
    stopwords: FrozenSet[str] = STOPWORDS
    positive_markers: FrozenSet[str] = POSITIVE_MARKERS
    negative_markers: FrozenSet[str] = NEGATIVE_MARKERS
    model_patterns: Tuple[ModelPattern, ...] = field(default=DEFAULT_MODEL_PATTERNS)


def default_lexicon() -> TrendLexicon:
    return TrendLexicon()
