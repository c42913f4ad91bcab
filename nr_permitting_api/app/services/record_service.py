"""
Business logic for process event records.

``RecordService`` mediates every read and write of the ``record``
table.  It generates transaction identifiers, encodes the
``process_event`` document as JSON text, runs each storage call
through :func:`execute_with_retry` and translates constraint
violations into domain errors.

The service holds no state besides the injected storage handle, so one
instance can be shared by all request handlers.  Records are
append-only: there are no update or delete operations.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar
from uuid import uuid4

from ..core.config import Settings, settings as default_settings
from ..core.db import RECORD_TABLE, SQLiteStorage
from ..schemas.record import RecordCreate, RecordCreateResponse, RecordRead
from .retry import execute_with_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordServiceError(Exception):
    """A storage operation on records failed."""


class RecordAlreadyExistsError(RecordServiceError):
    """The generated ``tx_id`` collided with an existing record."""


class InvalidRecordReferenceError(RecordServiceError):
    """A foreign key constraint rejected the record."""


class InvalidRecordEnumError(RecordServiceError):
    """A check constraint rejected an enum value in the record."""


def _decode_process_event(value: Any) -> Any:
    # Text columns hold JSON; native document columns are already decoded.
    if isinstance(value, (str, bytes, bytearray)):
        return json.loads(value)
    return value


def _to_record(row: Dict[str, Any]) -> RecordRead:
    return RecordRead(**{**row, "process_event": _decode_process_event(row["process_event"])})


class RecordService:
    """Service for creating and looking up records."""

    def __init__(self, storage, max_attempts: int = 3, retry_base_delay: float = 1.0):
        self.storage = storage
        self.max_attempts = max_attempts
        self.retry_base_delay = retry_base_delay

    async def _with_retry(self, operation: Callable[[], Awaitable[T]]) -> T:
        return await execute_with_retry(
            operation,
            max_attempts=self.max_attempts,
            base_delay=self.retry_base_delay,
        )

    async def create_record(self, request: RecordCreate) -> RecordCreateResponse:
        """Insert a new record and return it with a generated ``tx_id``.

        The request is expected to be validated already.  ``created_at``
        on the response is the time the response is built.

        Raises ``RecordAlreadyExistsError``, ``InvalidRecordReferenceError``
        or ``InvalidRecordEnumError`` for the matching constraint
        violations and ``RecordServiceError`` for anything else.
        """
        tx_id = str(uuid4())
        logger.info(
            "Creating record tx_id=%s system_id=%s record_id=%s record_kind=%s",
            tx_id,
            request.system_id,
            request.record_id,
            request.record_kind,
        )
        values = {
            "tx_id": tx_id,
            "version": request.version,
            "kind": request.kind,
            "system_id": request.system_id,
            "record_id": request.record_id,
            "record_kind": request.record_kind,
            "process_event": json.dumps(request.process_event),
        }
        try:
            row = await self._with_retry(lambda: self.storage.insert(RECORD_TABLE, values))
            record = _to_record(row)
            response = RecordCreateResponse(
                **record.model_dump(),
                created_at=datetime.now(timezone.utc).isoformat(),
            )
        except Exception as exc:
            logger.error(
                "Failed to create record tx_id=%s system_id=%s record_id=%s: %s",
                tx_id,
                request.system_id,
                request.record_id,
                exc,
            )
            raise self._translate_create_error(tx_id, exc) from exc

        logger.info(
            "Record created tx_id=%s system_id=%s record_id=%s",
            tx_id,
            request.system_id,
            request.record_id,
        )
        return response

    @staticmethod
    def _translate_create_error(tx_id: str, exc: Exception) -> RecordServiceError:
        message = str(exc)
        lowered = message.lower()
        if "duplicate key" in lowered or "unique constraint" in lowered:
            return RecordAlreadyExistsError(f"Record with tx_id {tx_id} already exists")
        if "foreign key" in lowered:
            return InvalidRecordReferenceError("Invalid reference in record data")
        if "check constraint" in lowered:
            return InvalidRecordEnumError("Invalid enum value in record data")
        return RecordServiceError(f"Database operation failed: {message or 'Unknown error'}")

    async def get_record_by_tx_id(self, tx_id: str) -> Optional[RecordRead]:
        """Return the record with ``tx_id`` or ``None`` if there is none."""
        logger.debug("Fetching record tx_id=%s", tx_id)
        try:
            row = await self._with_retry(
                lambda: self.storage.select_one(RECORD_TABLE, {"tx_id": tx_id})
            )
            record = None if row is None else _to_record(row)
        except Exception as exc:
            logger.error("Failed to retrieve record tx_id=%s: %s", tx_id, exc)
            raise RecordServiceError(f"Failed to retrieve record: {str(exc) or 'Unknown error'}") from exc

        if record is None:
            logger.debug("Record not found tx_id=%s", tx_id)
        return record

    async def get_records_by_system_and_record_id(
        self, system_id: str, record_id: str
    ) -> List[RecordRead]:
        """Return every record submitted for ``(system_id, record_id)``.

        Rows are ordered by ``tx_id`` descending.  Identifiers are random
        UUIDs, so this order is stable but not chronological.
        """
        logger.debug("Fetching records system_id=%s record_id=%s", system_id, record_id)
        try:
            rows = await self._with_retry(
                lambda: self.storage.select_many(
                    RECORD_TABLE,
                    {"system_id": system_id, "record_id": record_id},
                    order_by=[("tx_id", "desc")],
                )
            )
            records = [_to_record(row) for row in rows]
        except Exception as exc:
            logger.error(
                "Failed to retrieve records system_id=%s record_id=%s: %s",
                system_id,
                record_id,
                exc,
            )
            raise RecordServiceError(f"Failed to retrieve records: {str(exc) or 'Unknown error'}") from exc

        logger.debug(
            "Retrieved %s records system_id=%s record_id=%s",
            len(records),
            system_id,
            record_id,
        )
        return records


def build_record_service(config: Optional[Settings] = None) -> RecordService:
    """Build a ``RecordService`` over ``SQLiteStorage`` from settings.

    The database schema is migrated before the service is returned.
    """
    config = config or default_settings
    storage = SQLiteStorage(config.database_url, timeout=config.db_timeout_seconds)
    storage.init_db()
    return RecordService(
        storage,
        max_attempts=config.db_retry_attempts,
        retry_base_delay=config.db_retry_base_delay,
    )
