"""
PersistenceGateway

MongoDB operations for the 'users' (login events) and 'reports' collections.

Methods:
- record_login(username) -> LoginEvent
- record_report(fields) -> Report
- list_reports() -> List[Report]: Sorted by timestamp DESC
- ensure_indexes(): Create the timestamp index used by list_reports
- ping() -> bool: Health check

Records are only ever inserted; there is no update or delete.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from guardreport.errors import StorageError, ValidationError
from guardreport.storage.models import LoginEvent, Report, ReportFields

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
REPORTS_COLLECTION = "reports"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PersistenceGateway:
    """Stores login events and reports; owns identity and creation time."""

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._database = database
        self._users = database[USERS_COLLECTION]
        self._reports = database[REPORTS_COLLECTION]
        self._clock = clock

    async def record_login(self, username: str) -> LoginEvent:
        """
        Persist one login event for username.

        Raises:
            ValidationError: username is missing or empty
            StorageError: the insert failed
        """
        if not username:
            raise ValidationError("Användarnamn krävs", fields=["username"])

        event = LoginEvent(username=username, login_time=self._clock())
        document = event.to_document()

        try:
            result = await self._users.insert_one(document)
        except PyMongoError as e:
            logger.error(f"Failed to record login for {username!r}: {e}", exc_info=True)
            raise StorageError("Could not record login event") from e

        return event.model_copy(update={"id": str(result.inserted_id)})

    async def record_report(self, fields: ReportFields) -> Report:
        """
        Persist a submitted report, stamped with the current time.

        Raises:
            ValidationError: area, store, guards, type or description missing
            StorageError: the insert failed
        """
        missing = fields.missing_fields()
        if missing:
            raise ValidationError("Alla fält måste fyllas i", fields=missing)

        report = Report(
            **fields.model_dump(),
            timestamp=self._clock(),
        )
        document = report.to_document()

        try:
            result = await self._reports.insert_one(document)
        except PyMongoError as e:
            logger.error(f"Failed to store report from {report.guards[0]!r}: {e}", exc_info=True)
            raise StorageError("Could not store report") from e

        return report.model_copy(update={"id": str(result.inserted_id)})

    async def list_reports(self) -> List[Report]:
        """
        All reports, most recent first.

        Raises:
            StorageError: the query failed
        """
        try:
            cursor = self._reports.find().sort("timestamp", DESCENDING)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to fetch reports: {e}", exc_info=True)
            raise StorageError("Could not fetch reports") from e

        return [Report.model_validate(doc) for doc in documents]

    async def ensure_indexes(self) -> None:
        """Create the index backing the newest-first listing."""
        try:
            await self._reports.create_index([("timestamp", DESCENDING)])
        except PyMongoError as e:
            logger.error(f"Failed to create report indexes: {e}")
            raise StorageError("Could not create indexes") from e

    async def ping(self) -> bool:
        """Check if the database answers."""
        try:
            await self._database.command("ping")
            return True
        except PyMongoError:
            return False
