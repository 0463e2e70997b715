"""
Tests for startup configuration validation.
"""

import pytest

from paywall_access.config import DEFAULT_CONFIG_URL, ConfigurationError, Settings


class TestSettingsValidation:
    def test_development_accepts_loopback_default(self):
        config = Settings(environment="development", fewcents_config_url=DEFAULT_CONFIG_URL)
        assert not config.is_production

    def test_production_rejects_loopback(self):
        with pytest.raises(ConfigurationError, match="required in production"):
            Settings(environment="production", fewcents_config_url=DEFAULT_CONFIG_URL)

    def test_production_accepts_vendor_url(self):
        config = Settings(environment="Production", fewcents_config_url="https://api.fewcents.co")
        assert config.is_production

    @pytest.mark.parametrize("url", ["api.fewcents.co", "ftp://api.fewcents.co", ""])
    def test_rejects_non_http_url(self, url):
        with pytest.raises(ConfigurationError, match="absolute http"):
            Settings(fewcents_config_url=url)

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_rejects_non_positive_timeout(self, timeout):
        with pytest.raises(ConfigurationError, match="must be positive"):
            Settings(authorization_timeout_seconds=timeout)
