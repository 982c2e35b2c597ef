"""
tests/test_config.py
Test cases for configuration settings
"""

import json
import os
import tempfile
import unittest
from unittest.mock import patch

from config.settings import (
    Config,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
)


class TestConfigClass(unittest.TestCase):
    """Test Config class and settings"""

    def setUp(self):
        Config._config_data = None

    def tearDown(self):
        Config._config_data = None

    def test_default_context_batching(self):
        """Test context batching defaults"""
        with patch.dict(os.environ, {"CONFIG_PATH": "/nonexistent/config.json"}):
            self.assertEqual(Config.CONTEXT_BATCH_CEILING(), 500000)
            self.assertEqual(Config.CONTEXT_ROW_OVERHEAD(), 100)

    def test_default_privacy_settings(self):
        """Test IP anonymization defaults"""
        with patch.dict(os.environ, {"CONFIG_PATH": "/nonexistent/config.json"}):
            self.assertTrue(Config.ANONYMIZE_IP())
            self.assertIn("HTTP_X_FORWARDED_FOR", Config.IP_HEADER_NAMES())

    def test_config_file_overrides_defaults(self):
        """Test loading values from a JSON config file"""
        data = Config._get_default_config()
        data["context"]["batch_ceiling"] = 1000
        data["privacy"]["anonymize_ip"] = False

        with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as f:
            json.dump(data, f)
        try:
            with patch.dict(os.environ, {"CONFIG_PATH": f.name}):
                self.assertEqual(Config.CONTEXT_BATCH_CEILING(), 1000)
                self.assertFalse(Config.ANONYMIZE_IP())
        finally:
            os.unlink(f.name)

    def test_environment_overrides(self):
        """Test environment variables win over the config file"""
        env = {
            "CONFIG_PATH": "/nonexistent/config.json",
            "VERBOSE_DIAGNOSTICS": "true",
            "LANGUAGE_CODE": "de",
            "TABLE_PREFIX": "wp_",
        }
        with patch.dict(os.environ, env):
            self.assertTrue(Config.VERBOSE_DIAGNOSTICS())
            self.assertEqual(Config.LANGUAGE(), "de")
            self.assertEqual(Config.TABLE_PREFIX(), "wp_")

    def test_get_by_path(self):
        """Test dot-separated lookups"""
        with patch.dict(os.environ, {"CONFIG_PATH": "/nonexistent/config.json"}):
            self.assertEqual(Config.get("i18n.text_domain"), "auditlog")
            self.assertEqual(Config.get("i18n.missing", "fallback"), "fallback")

    def test_validate_default_config(self):
        """Test default configuration has no issues"""
        with patch.dict(os.environ, {"CONFIG_PATH": "/nonexistent/config.json"}):
            self.assertEqual(Config.validate_config(), [])

    def test_validate_reports_bad_values(self):
        """Test invalid batching and prefix values are reported"""
        data = Config._get_default_config()
        data["context"]["batch_ceiling"] = 50
        data["context"]["row_overhead"] = 100
        data["history"]["table_prefix"] = "bad-prefix;"
        Config._config_data = data

        issues = Config.validate_config()

        self.assertIn("context.row_overhead must be smaller than context.batch_ceiling", issues)
        self.assertIn("history.table_prefix may only contain letters, digits and underscores", issues)

    def test_save_config(self):
        """Test saving configuration to file"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "config.json")
            with patch.dict(os.environ, {"CONFIG_PATH": path}):
                data = Config._get_default_config()
                data["i18n"]["language"] = "fr"

                self.assertTrue(Config.save_config(data))
                self.assertEqual(Config.LANGUAGE(), "fr")


class TestEnvironmentConfigs(unittest.TestCase):
    """Test environment-specific configurations"""

    def test_get_config_by_flask_env(self):
        with patch.dict(os.environ, {"FLASK_ENV": "development"}):
            self.assertIs(get_config(), DevelopmentConfig)
        with patch.dict(os.environ, {"FLASK_ENV": "testing"}):
            self.assertIs(get_config(), TestingConfig)
        with patch.dict(os.environ, {"FLASK_ENV": "production"}):
            self.assertIs(get_config(), ProductionConfig)

    def test_development_config(self):
        self.assertTrue(DevelopmentConfig.DEBUG)
        self.assertTrue(DevelopmentConfig.VERBOSE_DIAGNOSTICS())

    def test_testing_config(self):
        self.assertTrue(TestingConfig.TESTING)
        self.assertTrue(TestingConfig.ANONYMIZE_IP())
