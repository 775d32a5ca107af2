"""
Fixture Store
Point lookups of sample quote bodies in the fixture table
"""

import logging

from shared.async_storage import AsyncTableStorageService
from shared.errors import FixtureNotFoundError
from shared.models import Fixture

logger = logging.getLogger(__name__)


class FixtureStore:
    """
    Read-only access to the fixture table.

    Entities live under one fixed partition key; the RowKey is the
    stringified serial number (1..MAX_MESSAGE_NUMBERS).
    """

    def __init__(self, table: AsyncTableStorageService, partition_key: str):
        self.table = table
        self.partition_key = partition_key

    async def get_fixture(self, serial_number: str) -> Fixture:
        """
        Look up the fixture stored under a serial number

        Raises:
            FixtureNotFoundError: If no usable fixture exists or the table is unreachable
        """
        try:
            entity = await self.table.get_entity(self.partition_key, serial_number)
        except Exception as e:
            raise FixtureNotFoundError(
                f"Failed to read fixture {self.partition_key}/{serial_number}: {e}"
            ) from e

        if entity is None or not entity.get("BodyContent"):
            raise FixtureNotFoundError(
                f"No fixture found for {self.partition_key}/{serial_number}"
            )

        return Fixture.from_entity(entity)
