import unittest

from aipulse.analytics.lexicon import ModelPattern
from aipulse.analytics.model_names import (
    ModelMention,
    extract_model_mentions,
    find_model_mentions,
    normalize_model_name,
    superseded_names,
)


class TestModelNames(unittest.TestCase):
    def test_normalize(self):
        self.assertEqual(normalize_model_name("foo-9"), "Foo-9")
        self.assertEqual(normalize_model_name("gpt 4o mini", "GPT"), "GPT-4o-mini")
        self.assertEqual(normalize_model_name("llama3"), "Llama-3")

    def test_extract_known_families(self):
        found = extract_model_mentions("OpenAI ships gpt-5 while Claude Sonnet 4.5 and gemini 2.5 pro compete")
        self.assertIn(("gpt", "GPT-5"), found)
        self.assertIn(("claude", "Claude-sonnet-4.5"), found)
        self.assertIn(("gemini", "Gemini-2.5-pro"), found)

    def test_case_insensitive(self):
        self.assertEqual(extract_model_mentions("GPT-4O is here"), [("gpt", "GPT-4o")])

    def test_custom_pattern_registry(self):
        patterns = (ModelPattern(family="foo", pattern=r"\bfoo[-\s]?(?P<version>\d+(?:\.\d+)?)\b"),)
        self.assertEqual(extract_model_mentions("Foo-9 beats foo 7", patterns), [("foo", "Foo-9"), ("foo", "Foo-7")])

    def test_refreshed_variant(self):
        self.assertTrue(ModelMention("gpt", "GPT-4o", "4", "o").is_refreshed)
        self.assertTrue(ModelMention("claude", "Claude-3.5-sonnet", "3.5").is_refreshed)
        self.assertFalse(ModelMention("gpt", "GPT-4", "4").is_refreshed)

    def test_superseded_generations(self):
        mentions = find_model_mentions("GPT-5 launch. Still on GPT-4o. Old GPT-4 posts. GPT-3.5 tutorials.")
        dropped = superseded_names(mentions)
        self.assertIn("GPT-4", dropped)
        self.assertIn("GPT-3.5", dropped)
        self.assertNotIn("GPT-4o", dropped)
        self.assertNotIn("GPT-5", dropped)

    def test_families_are_independent(self):
        mentions = find_model_mentions("GPT-5 and llama 2")
        self.assertEqual(superseded_names(mentions), set())

    def test_deepseek_lines_do_not_supersede_each_other(self):
        found = extract_model_mentions("DeepSeek R1 vs DeepSeek-V3")
        self.assertEqual(found, [("deepseek-v", "DeepSeek-v3"), ("deepseek-r", "DeepSeek-r1")])
        self.assertEqual(superseded_names(find_model_mentions("DeepSeek R1 vs DeepSeek V3")), set())

    def test_unregistered_name_uses_prefix_as_family(self):
        self.assertEqual(extract_model_mentions("Foo-9 tops the leaderboard"), [("foo", "Foo-9")])
        self.assertEqual(extract_model_mentions("Nova-2.1 is out"), [("nova", "Nova-2.1")])

    def test_registered_names_are_not_double_counted(self):
        self.assertEqual(extract_model_mentions("Llama-3 and GPT-5"), [("gpt", "GPT-5"), ("llama", "Llama-3")])
        self.assertEqual(extract_model_mentions("claude-sonnet-4.5"), [("claude", "Claude-sonnet-4.5")])

    def test_common_numbered_words_are_not_models(self):
        self.assertEqual(extract_model_mentions("Top-10 tips for Windows-11 and COVID-19"), [])


if __name__ == "__main__":
    unittest.main()
