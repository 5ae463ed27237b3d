import os
import unittest
from unittest import mock

from sitedesk.config import Settings, load_settings, normalize_range_policy, parse_cors_origins


class ConfigTests(unittest.TestCase):
    def test_normalize_range_policy(self):
        self.assertEqual(normalize_range_policy("CLAMP"), "clamp")
        self.assertEqual(normalize_range_policy(" reject "), "reject")
        self.assertEqual(normalize_range_policy("strict"), "off")
        self.assertEqual(normalize_range_policy(None), "off")

    def test_parse_cors_origins_deduplicates(self):
        self.assertEqual(
            parse_cors_origins("http://a, http://b,http://a,"),
            ["http://a", "http://b"],
        )
        self.assertEqual(parse_cors_origins(""), ["http://localhost:8000", "http://127.0.0.1:8000"])

    def test_load_settings_from_environment(self):
        env = {
            "GEMINI_API_KEY": " secret ",
            "GEMINI_MAX_OUTPUT_TOKENS": "12",
            "GEMINI_TIMEOUT_SECONDS": "not-a-number",
            "ADVISORY_ENABLED": "no",
            "NUMERIC_RANGE_POLICY": "clamp",
            "SEED_DEMO_DATA": "0",
        }
        with mock.patch.dict(os.environ, env), mock.patch("builtins.print"):
            loaded = load_settings()
        self.assertEqual(loaded.gemini_api_key, "secret")
        self.assertEqual(loaded.gemini_max_output_tokens, 64)
        self.assertEqual(loaded.gemini_timeout_seconds, 20.0)
        self.assertFalse(loaded.advisory_enabled)
        self.assertFalse(loaded.can_use_ai)
        self.assertEqual(loaded.numeric_range_policy, "clamp")
        self.assertFalse(loaded.seed_demo_data)

    def test_can_use_ai_requires_key(self):
        self.assertFalse(Settings().can_use_ai)
        self.assertTrue(Settings(gemini_api_key="key").can_use_ai)


if __name__ == "__main__":
    unittest.main()
