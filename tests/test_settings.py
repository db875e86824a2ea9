import os
import unittest
from datetime import timedelta
from unittest.mock import patch

from app.config.settings import Settings


def load(**env: str) -> Settings:
    with patch.dict(os.environ, env, clear=True):
        return Settings(_env_file=None)


class TestCacheConfigurationEnvVars(unittest.TestCase):
    def test_defaults(self):
        settings = load()
        self.assertEqual(settings.cache_size, 1000)
        self.assertEqual(settings.server_port, 8000)
        self.assertTrue(settings.tags_enabled)
        self.assertEqual(settings.cache_config.success_ttl, timedelta(hours=24))
        self.assertEqual(settings.cache_config.error_ttl, timedelta(hours=1))

    def test_valid_durations(self):
        settings = load(CACHE_SUCCESS_DURATION="48", CACHE_ERROR_DURATION="2")
        self.assertEqual(settings.cache_config.success_ttl, timedelta(hours=48))
        self.assertEqual(settings.cache_config.error_ttl, timedelta(hours=2))

    def test_invalid_durations_fall_back_to_default(self):
        with self.assertLogs("app.config.settings", level="WARNING") as logs:
            settings = load(CACHE_SUCCESS_DURATION="invalid", CACHE_ERROR_DURATION="-6")
        self.assertEqual(settings.cache_config.success_ttl, timedelta(hours=24))
        self.assertEqual(settings.cache_config.error_ttl, timedelta(hours=1))
        self.assertEqual(len(logs.records), 2)

    def test_empty_durations_fall_back_to_default(self):
        settings = load(CACHE_SUCCESS_DURATION="", CACHE_ERROR_DURATION="")
        self.assertEqual(settings.cache_success_duration, 24)
        self.assertEqual(settings.cache_error_duration, 1)

    def test_zero_duration_is_allowed(self):
        settings = load(CACHE_ERROR_DURATION="0")
        self.assertEqual(settings.cache_config.error_ttl, timedelta(0))

    def test_cache_size_and_port(self):
        settings = load(CacheSize="25", PORT="9000")
        self.assertEqual(settings.cache_size, 25)
        self.assertEqual(settings.server_port, 9000)

    def test_invalid_cache_size_falls_back_to_default(self):
        self.assertEqual(load(CacheSize="lots").cache_size, 1000)
        self.assertEqual(load(CacheSize="0").cache_size, 1000)


if __name__ == "__main__":
    unittest.main()
