"""
Unit tests for configuration loading and validation
"""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from shared.config import load_monitor_config, validate_monitor_config
from shared.errors import ConfigurationError


class TestLoadMonitorConfig:
    def test_loads_required_settings(self, monitor_env):
        config = load_monitor_config(monitor_env)

        assert config.username == "probe-user"
        assert config.login_url == "https://partner.example.com/token"
        assert config.sla_seconds == 5.0
        assert config.max_message_numbers == 1
        assert config.test_location == "uk-south"
        assert config.key_vault_url == "https://test-vault.vault.azure.net/"

    def test_defaults(self, monitor_env):
        config = load_monitor_config(monitor_env)

        assert config.fixture_table_name == "OrgAPITestBodyContent"
        assert config.fixture_partition_key == "SB"
        assert config.fixture_connection_string == "UseDevelopmentStorage=true"
        assert config.token_ttl_minutes == 45
        assert config.http_timeout_seconds is None

    def test_optional_overrides(self, monitor_env):
        config = load_monitor_config({
            **monitor_env,
            "FIXTURE_STORAGE_CONNECTION": "AccountName=fixtures;AccountKey=abc",
            "FIXTURE_TABLE_NAME": "QuoteFixtures",
            "FIXTURE_PARTITION_KEY": "PL",
            "HTTP_TIMEOUT_SEC": "30",
        })

        assert config.fixture_connection_string == "AccountName=fixtures;AccountKey=abc"
        assert config.fixture_table_name == "QuoteFixtures"
        assert config.fixture_partition_key == "PL"
        assert config.http_timeout_seconds == 30.0

    def test_reports_every_missing_setting(self, monitor_env):
        env = dict(monitor_env)
        del env["ORG_PWD"]
        del env["SB_QUOTE_URL"]

        with pytest.raises(ConfigurationError) as exc_info:
            load_monitor_config(env)

        message = str(exc_info.value)
        assert "ORG_PWD is not set" in message
        assert "SB_QUOTE_URL is not set" in message
        assert "CONFIGURATION VALIDATION FAILED" in message

    def test_rejects_non_numeric_sla(self, monitor_env):
        with pytest.raises(ConfigurationError, match="RESPONSE_TIME_SLA_IN_SEC must be a number"):
            load_monitor_config({**monitor_env, "RESPONSE_TIME_SLA_IN_SEC": "fast"})

    def test_rejects_zero_max_message_numbers(self, monitor_env):
        with pytest.raises(ConfigurationError, match="MAX_MESSAGE_NUMBERS must be greater than zero"):
            load_monitor_config({**monitor_env, "MAX_MESSAGE_NUMBERS": "0"})

    def test_requires_fixture_storage(self, monitor_env):
        env = dict(monitor_env)
        del env["AzureWebJobsStorage"]

        with pytest.raises(ConfigurationError, match="FIXTURE_STORAGE_CONNECTION"):
            load_monitor_config(env)

    def test_config_is_immutable(self, monitor_config):
        with pytest.raises(ValidationError):
            monitor_config.sla_seconds = 10

    def test_secrets_hidden_from_repr(self, monitor_config):
        assert "probe-password" not in repr(monitor_config)


class TestValidateMonitorConfig:
    def test_exits_on_invalid_configuration(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(SystemExit):
                validate_monitor_config()

    def test_passes_with_valid_configuration(self, monitor_env):
        with patch.dict("os.environ", monitor_env, clear=True):
            validate_monitor_config()
