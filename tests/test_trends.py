import unittest

from aipulse.analytics.lexicon import ModelPattern, TrendLexicon
from aipulse.analytics.trends import (
    MAX_TRENDS,
    TrendResult,
    detect_rising_keywords,
    is_significant_mention_shift,
    mention_count_trend,
    rank_trends,
)
from aipulse.ingestion.event_types import Event, SearchQuery


def ev(title, content="", source="rss"):
    return Event(title=title, content=content, source=source)


def _mixed_windows():
    current = (
        [ev(f"GPT-5 note {i}") for i in range(6)]
        + [ev(f"Claude Sonnet 4.5 review {i}") for i in range(4)]
        + [ev("Agentic coding everywhere")] * 6
        + [ev("Gemini 2.5 update")] * 3
    )
    previous = (
        [ev("GPT-5 rumor")] * 2
        + [ev("Claude Sonnet 4.5 teaser")] * 4
        + [ev("Agentic coding basics")] * 2
        + [ev("Gemini 2.5 update")] * 3
    )
    return current, previous


class TestDetectRisingKeywords(unittest.TestCase):
    def test_new_model_family_end_to_end(self):
        current = [ev(f"Foo-9 benchmark post {i}") for i in range(12)]
        previous = [ev(f"Unrelated story {i}") for i in range(5)]
        trends = detect_rising_keywords(current, previous)
        foo9 = [t for t in trends if t.keyword == "Foo-9"]
        self.assertEqual(foo9, [TrendResult(keyword="Foo-9", growth_rate=100.0, current_count=12)])
        self.assertFalse(any(t.keyword == "Foo-7" for t in trends))

    def test_new_family_older_generation_is_dropped(self):
        current = [ev(f"Foo-9 benchmark post {i}") for i in range(12)] + [ev("Foo-7 retrospective")] * 4
        keywords = [t.keyword for t in detect_rising_keywords(current, [])]
        self.assertIn("Foo-9", keywords)
        self.assertNotIn("Foo-7", keywords)

    def test_thresholds_hold_for_every_result(self):
        current, previous = _mixed_windows()
        for min_growth in (0, 50, 150):
            for t in detect_rising_keywords(current, previous, min_growth_rate=min_growth):
                self.assertGreaterEqual(t.growth_rate, min_growth)
                self.assertGreater(t.current_count, 0)

    def test_ordering(self):
        current, previous = _mixed_windows()
        trends = detect_rising_keywords(current, previous, min_growth_rate=0)
        self.assertTrue(trends)
        for a, b in zip(trends, trends[1:]):
            self.assertGreaterEqual(a.growth_rate, b.growth_rate)
            if a.growth_rate == b.growth_rate:
                self.assertGreaterEqual(a.current_count, b.current_count)

    def test_expected_signals(self):
        current, previous = _mixed_windows()
        trends = {t.keyword: t for t in detect_rising_keywords(current, previous)}
        self.assertAlmostEqual(trends["GPT-5"].growth_rate, 200.0)
        self.assertAlmostEqual(trends["agentic coding"].growth_rate, 200.0)
        # flat growth stays out at the default 50% bar
        self.assertNotIn("Claude-sonnet-4.5", trends)
        # 3 mentions is below the bigram floor of 5 and growth is 0
        self.assertNotIn("Gemini-2.5", trends)

    def test_idempotent(self):
        current, previous = _mixed_windows()
        queries = [SearchQuery("gpt-5 pricing", clicks=10)]
        first = detect_rising_keywords(current, previous, queries)
        second = detect_rising_keywords(current, previous, queries)
        self.assertEqual(first, second)

    def test_deduplicated_across_strategies(self):
        current = [ev("GPT-5 arrives")] * 5
        queries = [SearchQuery("gpt-5", clicks=4)]
        trends = detect_rising_keywords(current, [], queries)
        hits = [t for t in trends if t.keyword.lower() == "gpt-5"]
        self.assertEqual(len(hits), 1)
        # search-query strategy runs first, so its instance wins
        self.assertEqual(hits[0].keyword, "gpt-5")

    def test_strategy_floors(self):
        # two model mentions: below the model-name floor of 3
        self.assertEqual(detect_rising_keywords([ev("GPT-5"), ev("gpt-5")], []), [])
        # a single hit is enough when the keyword comes from search queries
        trends = detect_rising_keywords([ev("copilot workspace")], [], [SearchQuery("copilot", clicks=3)])
        self.assertEqual([t.keyword for t in trends], ["copilot"])

    def test_empty_windows(self):
        self.assertEqual(detect_rising_keywords([], []), [])
        self.assertEqual(detect_rising_keywords([], [], []), [])

    def test_missing_fields_do_not_raise(self):
        current = [{"title": None, "content": None, "source": "x"}, Event(title="GPT-5", content=None)]
        self.assertEqual(detect_rising_keywords(current, []), [])

    def test_truncated(self):
        current = []
        for i in range(MAX_TRENDS + 10):
            current.extend([ev(f"Foo-{i + 1}")] * 3)
        patterns = tuple(
            ModelPattern(family=f"foo{i}", pattern=rf"\bfoo-{i + 1}\b(?P<version>)") for i in range(MAX_TRENDS + 10)
        )
        trends = detect_rising_keywords(current, [], lexicon=TrendLexicon(model_patterns=patterns))
        self.assertEqual(len(trends), MAX_TRENDS)


class TestRankAndMentions(unittest.TestCase):
    def test_rank_tie_break(self):
        ranked = rank_trends([
            TrendResult("a", 100.0, 3),
            TrendResult("b", 250.0, 1),
            TrendResult("c", 100.0, 9),
        ])
        self.assertEqual([t.keyword for t in ranked], ["b", "c", "a"])

    def test_mention_count_trend(self):
        self.assertAlmostEqual(mention_count_trend([1] * 12, [1] * 10), 20.0)
        self.assertEqual(mention_count_trend([], []), 0.0)
        self.assertTrue(is_significant_mention_shift(-20.0))
        self.assertFalse(is_significant_mention_shift(10.0))


if __name__ == "__main__":
    unittest.main()
