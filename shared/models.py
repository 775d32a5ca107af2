"""
Pydantic models for the quote availability monitor
"""

import uuid
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    'Credential',
    'Fixture',
    'ProbeResult',
    'QuoteResponse',
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Credential(BaseModel):
    """Bearer token stored in Key Vault by the token refresher"""
    model_config = ConfigDict(frozen=True)

    token: str
    expires_on: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_on is None:
            return False
        now = now or _utcnow()
        expires_on = self.expires_on
        if expires_on.tzinfo is None:
            expires_on = expires_on.replace(tzinfo=timezone.utc)
        return expires_on <= now


class Fixture(BaseModel):
    """
    Sample quote request body stored in Table Storage.

    Entity layout: PartitionKey=partition_key, RowKey=serial_number,
    BodyContent=body_content, QuoteName=quote_name.
    """
    model_config = ConfigDict(frozen=True)

    partition_key: str
    serial_number: str
    body_content: str
    quote_name: str | None = None

    @classmethod
    def from_entity(cls, entity: dict) -> "Fixture":
        return cls(
            partition_key=entity["PartitionKey"],
            serial_number=entity["RowKey"],
            body_content=entity["BodyContent"],
            quote_name=entity.get("QuoteName"),
        )

    def to_entity(self) -> dict:
        entity = {
            "PartitionKey": self.partition_key,
            "RowKey": self.serial_number,
            "SerialNumber": self.serial_number,
            "BodyContent": self.body_content,
        }
        if self.quote_name is not None:
            entity["QuoteName"] = self.quote_name
        return entity


class ProbeResult(BaseModel):
    """Outcome of one availability probe run, emitted once as telemetry"""
    operation_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    location: str
    success: bool = False
    duration: timedelta = timedelta(0)
    timestamp: datetime | None = None
    message: str | None = None


class QuoteResponse(BaseModel):
    """Status and raw body of one quote POST"""
    status: int
    body: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 200
