from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from ota_sync.models.configurations import OtaConfiguration
from ota_sync.partners.types import PartnerCredentials, normalize_partner_name

# Columns that are safe to return to API clients and to log
PUBLIC_COLUMNS = (
    OtaConfiguration.id,
    OtaConfiguration.ota_name,
    OtaConfiguration.endpoint_url,
    OtaConfiguration.hotel_id,
    OtaConfiguration.is_active,
    OtaConfiguration.last_sync_at,
    OtaConfiguration.sync_frequency,
    OtaConfiguration.created_at,
    OtaConfiguration.updated_at,
)


def configuration_exists(conn: Connection, config_id: int) -> bool:
    """
    Check if an OTA configuration exists.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        config_id (int): Configuration ID to check.

    Returns:
        bool: True if the configuration exists, False otherwise.
    """
    result = conn.execute(select(OtaConfiguration.id).where(OtaConfiguration.id == config_id))
    return result.fetchone() is not None


def get_configuration(conn: Connection, config_id: int) -> Optional[dict[str, Any]]:
    """
    Fetch a configuration by id, active or not, without its secrets.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        config_id (int): Configuration ID.

    Returns:
        Optional[dict[str, Any]]: Public configuration fields or None if not found.
    """
    row = (
        conn.execute(select(*PUBLIC_COLUMNS).where(OtaConfiguration.id == config_id))
        .mappings()
        .fetchone()
    )
    return dict(row) if row else None


def list_configurations(conn: Connection) -> list[dict[str, Any]]:
    """
    List all configurations, newest first, without secrets.

    Args:
        conn (Connection): SQLAlchemy DB connection.

    Returns:
        list[dict[str, Any]]: Public configuration fields.
    """
    result = conn.execute(
        select(*PUBLIC_COLUMNS).order_by(
            OtaConfiguration.created_at.desc(), OtaConfiguration.id.desc()
        )
    )
    return [dict(row) for row in result.mappings()]


def get_configuration_by_name(conn: Connection, ota_name: str) -> Optional[dict[str, Any]]:
    """
    Find the configuration for a partner name.

    Names are compared after normalization, so "Booking.com" matches an
    existing "booking_com".

    Args:
        conn (Connection): SQLAlchemy DB connection.
        ota_name (str): Partner name to look for.

    Returns:
        Optional[dict[str, Any]]: Public configuration fields or None.
    """
    target = normalize_partner_name(ota_name)
    for row in list_configurations(conn):
        if normalize_partner_name(row["ota_name"]) == target:
            return row
    return None


def list_active_configurations(conn: Connection) -> list[dict[str, Any]]:
    """List active configurations ordered by id, without secrets."""
    result = conn.execute(
        select(*PUBLIC_COLUMNS)
        .where(OtaConfiguration.is_active.is_(True))
        .order_by(OtaConfiguration.id)
    )
    return [dict(row) for row in result.mappings()]


def get_partner_credentials(conn: Connection, config_id: int) -> Optional[PartnerCredentials]:
    """
    Read the secret columns of a configuration.

    This is the only reader of api_key / api_username / api_password; everything
    else works with the public columns.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        config_id (int): Configuration ID.

    Returns:
        Optional[PartnerCredentials]: Credentials or None if the configuration is missing.
    """
    row = conn.execute(
        select(
            OtaConfiguration.api_key,
            OtaConfiguration.api_username,
            OtaConfiguration.api_password,
        ).where(OtaConfiguration.id == config_id)
    ).fetchone()
    if row is None:
        return None
    return PartnerCredentials(api_key=row[0], api_username=row[1], api_password=row[2])
