import os
import unittest

from picko.config import Settings


class TestConfig(unittest.TestCase):
    def test_settings_defaults(self):
        previous = os.environ.pop("PICKO_NEWELL_API_URL", None)
        try:
            s = Settings()
            self.assertEqual(s.newell_api_url, "https://newell.fastshot.ai")
            self.assertEqual(s.generation_max_tokens, 400)
            self.assertEqual(s.generation_temperature, 0.7)
            self.assertEqual(s.cache_ttl_ms, 12 * 60 * 60 * 1000)
        finally:
            if previous is not None:
                os.environ["PICKO_NEWELL_API_URL"] = previous

    def test_settings_env_override_strips_slash(self):
        previous = os.environ.get("PICKO_NEWELL_API_URL")
        try:
            os.environ["PICKO_NEWELL_API_URL"] = "http://example.com/"
            s = Settings()
            self.assertEqual(s.newell_api_url, "http://example.com")
        finally:
            if previous is None:
                os.environ.pop("PICKO_NEWELL_API_URL", None)
            else:
                os.environ["PICKO_NEWELL_API_URL"] = previous

    def test_cache_ttl_override(self):
        previous = os.environ.get("PICKO_CACHE_TTL_HOURS")
        try:
            os.environ["PICKO_CACHE_TTL_HOURS"] = "1"
            s = Settings()
            self.assertEqual(s.cache_ttl_ms, 60 * 60 * 1000)
        finally:
            if previous is None:
                os.environ.pop("PICKO_CACHE_TTL_HOURS", None)
            else:
                os.environ["PICKO_CACHE_TTL_HOURS"] = previous


if __name__ == "__main__":
    unittest.main()
