import json
import unittest
from unittest import mock

import requests

from aipulse.analytics.report import TrendReport
from aipulse.analytics.sentiment import SentimentTrend
from aipulse.analytics.trends import TrendResult
from aipulse.briefs.blog_ideas import (
    TEMPLATE_MODEL,
    BlogIdea,
    generate_blog_ideas,
    parse_ideas,
    summarize_report,
    template_ideas,
)
from aipulse.ingestion.event_types import Event
from aipulse.storage.postgres_trends import store_blog_ideas


def _report():
    return TrendReport(
        trends=[TrendResult("GPT-5", 250.0, 14), TrendResult("agentic coding", 60.0, 7), TrendResult("MCP", 55.0, 4)],
        mention_growth_rate=18.0,
        sentiment_trend=SentimentTrend("positive", 60.0, 8, 5),
    )


EVENTS = [
    Event(title="OpenAI releases GPT-5", content="details", source="openai", source_type="official"),
    Event(title="Reddit thread", source="reddit/OpenAI", source_type="community"),
    Event(title="TechCrunch on agents", source="techcrunch", source_type="media"),
]


class TestBlogIdeas(unittest.TestCase):
    def test_template_ideas(self):
        ideas = template_ideas(_report(), EVENTS)
        self.assertEqual([i.title for i in ideas[:2]], ["OpenAI releases GPT-5", "TechCrunch on agents"])
        self.assertEqual(ideas[2].priority, "high")
        self.assertEqual(ideas[3].priority, "medium")
        self.assertEqual(len(ideas), 4)

    def test_parse_fenced_json(self):
        raw = '```json\n[{"title": "Why GPT-5 matters", "priority": "HIGH"}, {"summary": "no title"},]\n```'
        self.assertEqual(parse_ideas(raw), [BlogIdea(title="Why GPT-5 matters", priority="high")])

    def test_parse_wrapped_object(self):
        raw = json.dumps({"blog_ideas": [{"title": "A", "priority": "urgent"}]})
        self.assertEqual(parse_ideas(raw), [BlogIdea(title="A", priority="medium")])

    def test_parse_garbage(self):
        self.assertEqual(parse_ideas("sorry, I cannot help"), [])

    def test_summary_is_json_serializable(self):
        summary = summarize_report(_report(), EVENTS)
        self.assertEqual(summary["trends"][0], {"keyword": "GPT-5", "growth_rate": 250.0, "mentions": 14})
        self.assertEqual(summary["sentiment"]["sentiment"], "positive")
        json.dumps(summary)

    def test_no_key_falls_back(self):
        with mock.patch("aipulse.briefs.blog_ideas.requests.post") as post:
            ideas = generate_blog_ideas(_report(), EVENTS, api_key="")
        post.assert_not_called()
        self.assertEqual(ideas, template_ideas(_report(), EVENTS))

    def test_llm_response_used(self):
        resp = mock.Mock()
        resp.json.return_value = {"choices": [{"message": {"content": '[{"title": "GPT-5 hands-on", "priority": "high"}]'}}]}
        with mock.patch("aipulse.briefs.blog_ideas.requests.post", return_value=resp) as post:
            ideas = generate_blog_ideas(_report(), EVENTS, api_key="k", model="m")
        self.assertEqual(ideas, [BlogIdea(title="GPT-5 hands-on", priority="high", model_used="m")])
        self.assertEqual(post.call_args.kwargs["json"]["model"], "m")

    def test_request_error_falls_back(self):
        with mock.patch(
            "aipulse.briefs.blog_ideas.requests.post",
            side_effect=requests.exceptions.ConnectionError("down"),
        ):
            ideas = generate_blog_ideas(_report(), EVENTS, api_key="k", model="m")
        self.assertEqual(len(ideas), 4)
        self.assertEqual({i.model_used for i in ideas}, {TEMPLATE_MODEL})

    def test_stored_model_is_the_one_that_wrote_the_idea(self):
        conn = mock.MagicMock()
        cur = conn.__enter__.return_value.cursor.return_value.__enter__.return_value
        ideas = template_ideas(_report(), EVENTS)[:1] + [BlogIdea(title="From the LLM", model_used="m")]
        with mock.patch("aipulse.storage.postgres_trends.psycopg.connect", return_value=conn):
            n = store_blog_ideas("dsn", ideas, model_used="fallback")
        self.assertEqual(n, 2)
        self.assertEqual([c.args[1][-1] for c in cur.execute.call_args_list], [TEMPLATE_MODEL, "m"])


if __name__ == "__main__":
    unittest.main()
