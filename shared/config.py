"""
Configuration and Validation Module

Loads the monitor configuration from environment variables (app settings).
Collects every problem before failing so one deployment fixes them all.
"""

import logging
import os
import sys

from pydantic import BaseModel, ConfigDict, Field

from shared.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_FIXTURE_TABLE = "OrgAPITestBodyContent"
DEFAULT_FIXTURE_PARTITION = "SB"
DEFAULT_TOKEN_TTL_MINUTES = 45

# env var -> (field name, description used in error hints)
REQUIRED_SETTINGS = {
    "ORG_USER_NAME": ("username", "Partner API login user name"),
    "ORG_PWD": ("password", "Partner API login password"),
    "SB_LOGIN_URL": ("login_url", "Password-grant token endpoint"),
    "SECRET_NAME": ("secret_name", "Key Vault secret holding the bearer token"),
    "KEY_VAULT_NAME": ("key_vault_name", "Key Vault name (<name>.vault.azure.net)"),
    "SB_QUOTE_URL": ("quote_url", "Quote endpoint probed every minute"),
    "TEST_NAME": ("test_name", "Availability test name reported to Application Insights"),
    "TEST_REGION_NAME": ("test_location", "Run location reported to Application Insights"),
    "RESPONSE_TIME_SLA_IN_SEC": ("sla_seconds", "Maximum acceptable quote round trip in seconds"),
    "MAX_MESSAGE_NUMBERS": ("max_message_numbers", "Highest fixture serial number stored in the table"),
    "APPINSIGHTS_INSTRUMENTATIONKEY": ("instrumentation_key", "Application Insights instrumentation key"),
}


class MonitorConfig(BaseModel):
    """Immutable settings passed into the refresher and the probe"""
    model_config = ConfigDict(frozen=True)

    username: str
    password: str = Field(repr=False)
    login_url: str
    secret_name: str
    key_vault_name: str
    quote_url: str
    test_name: str
    test_location: str
    sla_seconds: float = Field(gt=0)
    max_message_numbers: int = Field(ge=1)
    instrumentation_key: str = Field(repr=False)

    fixture_connection_string: str | None = Field(default=None, repr=False)
    fixture_table_name: str = DEFAULT_FIXTURE_TABLE
    fixture_partition_key: str = DEFAULT_FIXTURE_PARTITION
    token_ttl_minutes: int = Field(default=DEFAULT_TOKEN_TTL_MINUTES, ge=1)
    http_timeout_seconds: float | None = None

    @property
    def key_vault_url(self) -> str:
        return f"https://{self.key_vault_name}.vault.azure.net/"


def load_monitor_config(environ: dict | None = None) -> MonitorConfig:
    """
    Build MonitorConfig from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        MonitorConfig

    Raises:
        ConfigurationError: Listing every missing or malformed setting
    """
    env = os.environ if environ is None else environ
    errors = []
    values: dict = {}

    for env_name, (field, description) in REQUIRED_SETTINGS.items():
        raw = env.get(env_name)
        if not raw:
            errors.append(f"{env_name} is not set\n  → {description}")
            continue
        values[field] = raw

    for env_name, field, cast in (
        ("RESPONSE_TIME_SLA_IN_SEC", "sla_seconds", float),
        ("MAX_MESSAGE_NUMBERS", "max_message_numbers", int),
    ):
        if field not in values:
            continue
        try:
            values[field] = cast(values[field])
        except ValueError:
            errors.append(f"{env_name} must be a number, got '{values[field]}'")
            del values[field]
            continue
        if values[field] <= 0:
            errors.append(f"{env_name} must be greater than zero, got {values[field]}")

    values["fixture_connection_string"] = (
        env.get("FIXTURE_STORAGE_CONNECTION") or env.get("AzureWebJobsStorage")
    )
    if not values["fixture_connection_string"]:
        errors.append(
            "FIXTURE_STORAGE_CONNECTION is not set\n"
            "  → Storage account holding the fixture table (AzureWebJobsStorage is used when unset)"
        )
    if env.get("FIXTURE_TABLE_NAME"):
        values["fixture_table_name"] = env["FIXTURE_TABLE_NAME"]
    if env.get("FIXTURE_PARTITION_KEY"):
        values["fixture_partition_key"] = env["FIXTURE_PARTITION_KEY"]

    for env_name, field, cast in (
        ("TOKEN_TTL_MINUTES", "token_ttl_minutes", int),
        ("HTTP_TIMEOUT_SEC", "http_timeout_seconds", float),
    ):
        raw = env.get(env_name)
        if not raw:
            continue
        try:
            values[field] = cast(raw)
        except ValueError:
            errors.append(f"{env_name} must be a number, got '{raw}'")

    if errors:
        raise ConfigurationError(_format_errors(errors))

    return MonitorConfig(**values)


def validate_monitor_config() -> None:
    """
    Validate configuration at startup.

    Fails fast with clear error messages if configuration is invalid.

    Raises:
        SystemExit: If configuration is invalid
    """
    try:
        load_monitor_config()
    except ConfigurationError as e:
        error_msg = str(e) + "Application cannot start with invalid configuration.\n"
        # Log to both logger (for Azure Functions logs) and stderr (for immediate visibility)
        logger.error(error_msg)
        print(error_msg, file=sys.stderr)
        sys.exit(1)

    logger.info("✓ Monitor configuration validated successfully")


def _format_errors(errors: list[str]) -> str:
    error_msg = "\n" + "="*70 + "\n"
    error_msg += "CONFIGURATION VALIDATION FAILED\n"
    error_msg += "="*70 + "\n"
    for error in errors:
        error_msg += f"\n{error}\n"
    error_msg += "="*70 + "\n"
    return error_msg
