"""
Table initialization script for the quote availability monitor
Creates the fixture table for both local (Azurite) and production storage

Run this script once during initial setup or after resetting Azurite
"""

import logging
import os

from azure.core.exceptions import ResourceExistsError
from azure.data.tables import TableServiceClient

from shared.config import DEFAULT_FIXTURE_TABLE

logger = logging.getLogger(__name__)


def init_tables(connection_string: str | None = None, table_names: list[str] | None = None) -> dict:
    """
    Initialize the fixture table(s)

    Args:
        connection_string: Azure Storage connection string
                          Defaults to FIXTURE_STORAGE_CONNECTION, then AzureWebJobsStorage
        table_names: Tables to create (defaults to FIXTURE_TABLE_NAME or OrgAPITestBodyContent)

    Returns:
        dict: Summary of table creation results
    """
    if connection_string is None:
        connection_string = (
            os.environ.get("FIXTURE_STORAGE_CONNECTION") or os.environ.get("AzureWebJobsStorage")
        )

    if not connection_string:
        raise ValueError(
            "AzureWebJobsStorage environment variable not set")

    if table_names is None:
        table_names = [os.environ.get("FIXTURE_TABLE_NAME") or DEFAULT_FIXTURE_TABLE]

    logger.info("Initializing Azure Table Storage tables...")
    logger.info(f"Connection: {mask_connection_string(connection_string)}")

    service_client = TableServiceClient.from_connection_string(
        connection_string)

    results = {
        "created": [],
        "already_exists": [],
        "failed": []
    }

    for table_name in table_names:
        try:
            # Check if table already exists
            tables = list(service_client.query_tables(
                f"TableName eq '{table_name}'"))

            if tables:
                logger.info(f"✓ Table '{table_name}' already exists")
                results["already_exists"].append(table_name)
            else:
                service_client.create_table(table_name)
                logger.info(f"✓ Created table '{table_name}'")
                results["created"].append(table_name)

        except ResourceExistsError:
            # Race condition - table was created between check and create
            logger.info(f"✓ Table '{table_name}' already exists")
            results["already_exists"].append(table_name)

        except Exception as e:
            logger.error(f"✗ Failed to create table '{table_name}': {str(e)}")
            results["failed"].append({"table": table_name, "error": str(e)})

    return results


def mask_connection_string(conn_str: str) -> str:
    """Mask sensitive parts of connection string for logging"""
    if "UseDevelopmentStorage=true" in conn_str:
        return "UseDevelopmentStorage=true (Azurite)"

    # Mask the account key
    if "AccountKey=" in conn_str:
        parts = conn_str.split("AccountKey=")
        if len(parts) == 2:
            key_part = parts[1].split(";")[0]
            masked_key = key_part[:8] + "..." + \
                key_part[-4:] if len(key_part) > 12 else "***"
            return conn_str.replace(key_part, masked_key)

    return conn_str
