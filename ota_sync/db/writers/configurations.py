from datetime import datetime
from typing import Any, Optional

import structlog
from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from ota_sync.models.configurations import OtaConfiguration
from ota_sync.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def insert_configuration(conn: Connection, data: dict[str, Any]) -> int:
    """
    Insert a new OTA configuration.

    Args:
        conn (Connection): SQLAlchemy DB connection (within a transaction).
        data (dict): Column values; ota_name and endpoint_url are required.

    Returns:
        int: Generated configuration id.
    """
    now = utc_now()
    row = {
        "ota_name": data["ota_name"],
        "api_key": data.get("api_key"),
        "api_username": data.get("api_username"),
        "api_password": data.get("api_password"),
        "endpoint_url": data["endpoint_url"],
        "hotel_id": data.get("hotel_id"),
        "is_active": data.get("is_active", True),
        "sync_frequency": data.get("sync_frequency") or 60,
        "created_at": now,
        "updated_at": now,
    }

    result = conn.execute(insert(OtaConfiguration).values(**row))
    config_id = int(result.inserted_primary_key[0])

    logger.info("configuration_inserted", config_id=config_id, ota_name=row["ota_name"])
    return config_id


def update_configuration(conn: Connection, config_id: int, data: dict[str, Any]) -> None:
    """
    Update configuration fields for an existing configuration.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        config_id (int): Configuration ID.
        data (dict): Fields to update (only non-None values)
    """
    values = dict(data)
    values["updated_at"] = utc_now()

    stmt = update(OtaConfiguration).where(OtaConfiguration.id == config_id).values(**values)
    conn.execute(stmt)


def soft_delete_configuration(conn: Connection, config_id: int) -> None:
    """
    Deactivate a configuration so that bulk and scheduled syncs skip it.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        config_id (int): Configuration ID.
    """
    stmt = (
        update(OtaConfiguration)
        .where(OtaConfiguration.id == config_id)
        .values(is_active=False, updated_at=utc_now())
    )
    conn.execute(stmt)


def hard_delete_configuration(conn: Connection, config_id: int) -> None:
    """
    Permanently delete a configuration. Its sync log rows are kept.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        config_id (int): Configuration ID.
    """
    conn.execute(delete(OtaConfiguration).where(OtaConfiguration.id == config_id))


def update_last_sync(conn: Connection, config_id: int, synced_at: Optional[datetime] = None) -> None:
    """
    Update the last_sync_at timestamp for a configuration.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        config_id (int): Configuration ID.
        synced_at (Optional[datetime]): Timestamp to store, defaults to now.
    """
    now = synced_at or utc_now()

    stmt = (
        update(OtaConfiguration)
        .where(OtaConfiguration.id == config_id)
        .values(last_sync_at=now, updated_at=now)
    )
    conn.execute(stmt)
