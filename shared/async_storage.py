"""
Async Table Storage Service
Point reads from the fixture table for the availability probe
"""

import logging
import os

from azure.core.exceptions import ResourceNotFoundError
from azure.data.tables.aio import TableClient

logger = logging.getLogger(__name__)


class AsyncTableStorageService:
    """
    Async reads from a single Azure Table

    Usage:
        async with AsyncTableStorageService("OrgAPITestBodyContent", conn_str) as table:
            entity = await table.get_entity("SB", "1")
    """

    def __init__(self, table_name: str, connection_string: str | None = None):
        self.table_name = table_name
        self.connection_string = connection_string or os.environ.get("AzureWebJobsStorage")

        if not self.connection_string:
            raise ValueError("AzureWebJobsStorage environment variable not set")

        self._client: TableClient | None = None

    @property
    def table_client(self) -> TableClient:
        """TableClient for this table, created on first use"""
        if self._client is None:
            self._client = TableClient.from_connection_string(
                self.connection_string, self.table_name
            )
        return self._client

    async def __aenter__(self):
        await self.table_client.__aenter__()
        return self

    async def __aexit__(self, *args):
        if self._client is not None:
            client, self._client = self._client, None
            await client.__aexit__(*args)

    async def get_entity(self, partition_key: str, row_key: str) -> dict | None:
        """
        Read one entity

        Returns:
            Entity dictionary, or None when (partition_key, row_key) has no row
        """
        try:
            entity = await self.table_client.get_entity(
                partition_key=partition_key, row_key=row_key
            )
        except ResourceNotFoundError:
            logger.debug(f"No row in {self.table_name} for PK={partition_key} RK={row_key}")
            return None

        return dict(entity)
