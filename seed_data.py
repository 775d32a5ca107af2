"""
Seed data script for the quote availability monitor
Populates the fixture table with sample quote request bodies

Usage:
    python seed_data.py                       # built-in sample body as serial 1
    python seed_data.py fixtures.json         # one fixture per body in a JSON list
    python seed_data.py fixtures.json "<conn>"

Serial numbers are assigned 1..N in file order, so MAX_MESSAGE_NUMBERS should be N.
"""

import json
import logging
import os

from azure.core.exceptions import ResourceNotFoundError
from azure.data.tables import TableClient

from shared.config import DEFAULT_FIXTURE_PARTITION, DEFAULT_FIXTURE_TABLE
from shared.init_tables import init_tables
from shared.models import Fixture

logger = logging.getLogger(__name__)

SAMPLE_QUOTE_BODY = {
    "loanType": "PersonalLoansRedirect",
    "loanPurpose": "Car",
    "loanAmount": 3000,
    "term": 24,
    "deposit": 0,
    "partnerInfo": {
        "partnerId": "00000000-0000-0000-0000-000000000000",
        "partnerTrackingId": "synthetic-availability-probe",
        "partnerAdditionalReference": None
    },
    "applicants": [
        {
            "title": "Ms",
            "forename": "Test",
            "surname": "Applicant",
            "gender": "Female",
            "dateOfBirth": "01/07/1963",
            "emailAddress": "synthetic.probe@example.com",
            "residentialStatus": "OwnerOccupier",
            "maritalStatus": "Cohabiting",
            "grossIncome": 30000,
            "incomeFrequency": "Annually",
            "employmentStatus": "Employed",
            "contactInfo": {
                "telephoneNumber": "07700900000"
            }
        }
    ],
    "addresses": [
        {
            "houseNumber": 75,
            "postcode": "AB1 2CD"
        }
    ]
}


def is_development_storage(connection_string: str) -> bool:
    """Check if using development storage (Azurite)"""
    return "UseDevelopmentStorage=true" in connection_string or "devstoreaccount1" in connection_string


def build_fixtures(bodies: list, partition_key: str = DEFAULT_FIXTURE_PARTITION) -> list[Fixture]:
    """Number request bodies 1..N as fixtures"""
    fixtures = []
    for serial_number, body in enumerate(bodies, start=1):
        body_content = body if isinstance(body, str) else json.dumps(body)
        fixtures.append(Fixture(
            partition_key=partition_key,
            serial_number=str(serial_number),
            body_content=body_content,
            quote_name=partition_key,
        ))
    return fixtures


def load_bodies(path: str | None) -> list:
    """Read a JSON list of request bodies, or fall back to the built-in sample"""
    if path is None:
        return [SAMPLE_QUOTE_BODY]

    with open(path, encoding="utf-8") as f:
        bodies = json.load(f)

    if not isinstance(bodies, list) or not bodies:
        raise ValueError(f"{path} must contain a non-empty JSON list of request bodies")
    return bodies


def seed_table(connection_string: str, table_name: str, fixtures: list[Fixture], overwrite: bool) -> tuple[int, int]:
    """Seed the fixture table (only missing rows unless overwrite)"""
    table_client = TableClient.from_connection_string(
        connection_string, table_name)

    inserted = 0
    skipped = 0

    with table_client:
        for fixture in fixtures:
            entity = fixture.to_entity()
            if not overwrite:
                try:
                    table_client.get_entity(
                        partition_key=entity["PartitionKey"],
                        row_key=entity["RowKey"]
                    )
                    logger.info(f"  ⊘ Skipped {table_name}: {entity['RowKey']} (already exists)")
                    skipped += 1
                    continue
                except ResourceNotFoundError:
                    pass

            table_client.upsert_entity(entity)
            logger.info(f"  ✓ Upserted {table_name}: {entity['RowKey']}")
            inserted += 1

    return inserted, skipped


def seed_all_data(fixtures_path: str | None = None, connection_string: str | None = None) -> dict:
    """Create the fixture table and seed it"""
    if connection_string is None:
        connection_string = (
            os.environ.get("FIXTURE_STORAGE_CONNECTION") or os.environ.get("AzureWebJobsStorage")
        )

    if not connection_string:
        raise ValueError(
            "AzureWebJobsStorage environment variable not set")

    table_name = os.environ.get("FIXTURE_TABLE_NAME") or DEFAULT_FIXTURE_TABLE
    partition_key = os.environ.get("FIXTURE_PARTITION_KEY") or DEFAULT_FIXTURE_PARTITION

    results = init_tables(connection_string, [table_name])
    if results["failed"]:
        raise RuntimeError(f"Could not create fixture table {table_name}")

    fixtures = build_fixtures(load_bodies(fixtures_path), partition_key)

    # Development storage gets every row rewritten; production only receives missing rows
    overwrite = is_development_storage(connection_string)
    inserted, skipped = seed_table(connection_string, table_name, fixtures, overwrite)

    logger.info("=" * 60)
    logger.info(f"{table_name}: +{inserted} upserted, ⊘{skipped} existing")
    logger.info(f"Set MAX_MESSAGE_NUMBERS={len(fixtures)}")
    logger.info("=" * 60)

    return {"table": table_name, "inserted": inserted, "skipped": skipped, "total": len(fixtures)}


if __name__ == "__main__":
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    fixtures_arg = sys.argv[1] if len(sys.argv) > 1 else None
    conn_str = sys.argv[2] if len(sys.argv) > 2 else None

    try:
        seed_all_data(fixtures_arg, conn_str)
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error during data seeding: {str(e)}")
        sys.exit(1)
