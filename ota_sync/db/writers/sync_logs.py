"""Append-only writer for the OTA sync log."""

from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy import insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ota_sync.config import MAX_LOG_MESSAGE_LENGTH
from ota_sync.errors import PersistenceError
from ota_sync.models.sync_logs import SYNC_STATUSES, SYNC_TYPES, OtaSyncLog
from ota_sync.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def truncate_message(message: Optional[str], limit: int = MAX_LOG_MESSAGE_LENGTH) -> Optional[str]:
    if message is None or len(message) <= limit:
        return message
    return message[: limit - 3] + "..."


def append_sync_log(
    engine: Engine,
    configuration_id: Optional[int],
    sync_type: str,
    status: str,
    message: Optional[str],
    records_processed: int = 0,
    sync_started_at: Optional[datetime] = None,
    sync_completed_at: Optional[datetime] = None,
) -> int:
    """
    Append one sync log entry in its own transaction.

    The row is written with a single INSERT, so an entry is either stored
    completely or not at all.

    Args:
        engine: SQLAlchemy Engine
        configuration_id: Configuration the attempt belongs to
        sync_type: availability, rates, inventory or bookings
        status: success, failed or partial
        message: Free text; truncated to MAX_LOG_MESSAGE_LENGTH
        records_processed: Number of room records sent
        sync_started_at: Start of the attempt (defaults to now)
        sync_completed_at: End of the attempt

    Returns:
        int: Id of the new log row

    Raises:
        ValueError: If sync_type or status is not one of the allowed values
        PersistenceError: If the database write fails
    """
    if sync_type not in SYNC_TYPES:
        raise ValueError(f"Invalid sync_type: {sync_type}")
    if status not in SYNC_STATUSES:
        raise ValueError(f"Invalid sync status: {status}")

    row = {
        "configuration_id": configuration_id,
        "sync_type": sync_type,
        "status": status,
        "message": truncate_message(message),
        "records_processed": records_processed,
        "sync_started_at": sync_started_at or utc_now(),
        "sync_completed_at": sync_completed_at,
    }

    try:
        with engine.begin() as conn:
            result = conn.execute(insert(OtaSyncLog).values(**row))
            log_id = int(result.inserted_primary_key[0])
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to write sync log: {e}") from e

    logger.debug("sync_log_appended", log_id=log_id, configuration_id=configuration_id, status=status)
    return log_id
