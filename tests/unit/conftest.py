"""
Pytest fixtures shared by the unit tests.

Provides:
- A complete app settings mapping and the MonitorConfig built from it
"""

import pytest

from shared.config import MonitorConfig, load_monitor_config


@pytest.fixture
def monitor_env():
    """App settings as they appear in the Function App configuration"""
    return {
        "ORG_USER_NAME": "probe-user",
        "ORG_PWD": "probe-password",
        "SB_LOGIN_URL": "https://partner.example.com/token",
        "SECRET_NAME": "quote-api-token",
        "KEY_VAULT_NAME": "test-vault",
        "SB_QUOTE_URL": "https://partner.example.com/api/quote",
        "TEST_NAME": "Quote-Availability",
        "TEST_REGION_NAME": "uk-south",
        "RESPONSE_TIME_SLA_IN_SEC": "5",
        "MAX_MESSAGE_NUMBERS": "1",
        "APPINSIGHTS_INSTRUMENTATIONKEY": "00000000-0000-0000-0000-000000000001",
        "AzureWebJobsStorage": "UseDevelopmentStorage=true",
    }


@pytest.fixture
def monitor_config(monitor_env) -> MonitorConfig:
    """MonitorConfig with SLA=5s and a single fixture"""
    return load_monitor_config(monitor_env)
