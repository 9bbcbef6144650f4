"""Tests for configuration loading."""

import datetime
import unittest

from waka_readme.config import DEFAULT_COMMIT_MESSAGE, ConfigError, ReportConfig


class TestConfigLoading(unittest.TestCase):
    """Test building the config from the environment."""

    def test_from_env(self):
        env = {"GH_TOKEN": "ghp_x", "WAKATIME_API_KEY": "waka_x", "TIMEZONE": "Asia/Shanghai"}
        config = ReportConfig.from_env(env)
        self.assertEqual(config.github_token, "ghp_x")
        self.assertTrue(config.wakatime_enabled)
        self.assertEqual(config.timezone_label, "Asia/Shanghai")
        self.assertEqual(config.commit_message, DEFAULT_COMMIT_MESSAGE)

    def test_overrides_win_and_none_ignored(self):
        env = {"GH_TOKEN": "from-env", "TIMEZONE": "UTC"}
        config = ReportConfig.from_env(env, github_token="from-cli", timezone_name=None, max_workers=8)
        self.assertEqual(config.github_token, "from-cli")
        self.assertEqual(config.timezone_name, "UTC")
        self.assertEqual(config.max_workers, 8)

    def test_missing_token(self):
        with self.assertRaises(ConfigError):
            ReportConfig.from_env({})

    def test_wakatime_optional(self):
        config = ReportConfig.from_env({"GH_TOKEN": "t"})
        self.assertFalse(config.wakatime_enabled)

    def test_invalid_max_workers(self):
        with self.assertRaises(ConfigError):
            ReportConfig(github_token="t", max_workers=0)


class TestTimezone(unittest.TestCase):
    """Test timezone resolution."""

    def test_named_zone(self):
        config = ReportConfig(github_token="t", timezone_name="Europe/Berlin")
        moment = datetime.datetime(2024, 7, 1, 12, tzinfo=config.tzinfo)
        self.assertEqual(moment.utcoffset(), datetime.timedelta(hours=2))

    def test_default_is_system_local(self):
        """Verify an unset zone defers to the system rules instead of a fixed offset."""
        config = ReportConfig(github_token="t")
        self.assertIsNone(config.tzinfo)
        self.assertTrue(config.timezone_label.startswith("local"))

    def test_unknown_zone_is_fatal(self):
        """Verify an unknown zone name fails when the config is built."""
        with self.assertRaises(ConfigError):
            ReportConfig(github_token="t", timezone_name="Mars/Olympus_Mons")


if __name__ == "__main__":
    unittest.main()
