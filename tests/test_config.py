import os
import unittest
from unittest import mock

from stoichlab.config import Settings, load_settings


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(load_settings(), Settings())

    def test_environment_overrides(self):
        env = {
            "STOICHLAB_LOG_LEVEL": "debug",
            "STOICHLAB_MAX_DENOMINATOR": "50",
            "STOICHLAB_FALLBACK_MOLAR_MASS": "1.5",
            "STOICHLAB_STRICT_MOLAR_MASS": "yes",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.max_denominator, 50)
        self.assertEqual(settings.fallback_molar_mass, 1.5)
        self.assertTrue(settings.strict_molar_mass)

    def test_invalid_values_fall_back(self):
        env = {"STOICHLAB_PIVOT_EPSILON": "tiny", "STOICHLAB_MAX_DENOMINATOR": "-3"}
        with mock.patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        self.assertEqual(settings.pivot_epsilon, 1e-12)
        self.assertEqual(settings.max_denominator, 1)


if __name__ == '__main__':
    unittest.main()
