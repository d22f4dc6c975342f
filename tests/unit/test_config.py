"""
Tests for settings loading
"""

import pytest

from d365fo_metadata import config as config_module
from d365fo_metadata.config import Settings, get_settings
from d365fo_metadata.errors import ConfigurationError


@pytest.mark.unit
class TestSettings:
    def test_defaults_are_empty(self):
        settings = Settings(_env_file=None)

        assert settings.url == ""
        assert settings.request_timeout == 30.0
        assert not settings.is_configured

    def test_env_file_values(self, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("D365FO_URL=https://file.dynamics.com\nD365FO_CLIENT_ID=file-client\n")

        settings = Settings(_env_file=env_file)

        assert settings.url == "https://file.dynamics.com"
        assert settings.client_id == "file-client"
        assert settings.is_configured

    def test_system_url_alone_counts_as_configured(self):
        assert Settings(_env_file=None, system_url="https://a-aos.cloudax.dynamics.com").is_configured


@pytest.mark.unit
class TestGetSettings:
    def test_singleton_until_reset(self, monkeypatch):
        monkeypatch.setenv("D365FO_URL", "https://first.dynamics.com")
        first = get_settings()

        monkeypatch.setenv("D365FO_URL", "https://second.dynamics.com")
        assert get_settings() is first

        config_module.reset_settings()
        assert get_settings().url == "https://second.dynamics.com"

    def test_invalid_environment_is_configuration_error(self, monkeypatch):
        monkeypatch.setenv("D365FO_REQUEST_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError, match="D365FO_"):
            get_settings()
