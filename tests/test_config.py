import os
import unittest
from unittest.mock import patch

from light_widget.config import AppConfig, _env_bool, _env_instances, _env_int


class TestConfig(unittest.TestCase):
    def test_env_int_fallback(self):
        with patch.dict(os.environ, {"FEED_TIMEOUT_SECONDS": "abc"}):
            self.assertEqual(_env_int("FEED_TIMEOUT_SECONDS", 10), 10)
        with patch.dict(os.environ, {"FEED_TIMEOUT_SECONDS": "5"}):
            self.assertEqual(_env_int("FEED_TIMEOUT_SECONDS", 10), 5)

    def test_env_bool(self):
        for raw, expected in (("0", False), ("off", False), ("yes", True), ("", True)):
            with patch.dict(os.environ, {"EXACT_WAKE": raw}):
                self.assertEqual(_env_bool("EXACT_WAKE", True), expected)

    def test_instances(self):
        with patch.dict(os.environ, {"WIDGET_INSTANCES": "1=GPV1.1, 2 = GPV3.2,broken,=GPV1.1"}):
            self.assertEqual(_env_instances("WIDGET_INSTANCES"), {"1": "GPV1.1", "2": "GPV3.2"})

    def test_midnight_time_is_clamped(self):
        cfg = AppConfig(midnight_hour=25, midnight_minute=75)
        self.assertEqual((cfg.midnight_hour, cfg.midnight_minute), (0, 1))


if __name__ == "__main__":
    unittest.main()
