"""
Internal helper functions for configuration and sync route handlers.

This module contains validation and utility functions to reduce duplication
and improve readability in the main route handlers.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import HTTPException, status
from sqlalchemy.engine import Connection

from ota_sync.db.readers.configurations import configuration_exists, get_configuration_by_name


def validate_configuration_exists_or_404(conn: Connection, config_id: int) -> None:
    """
    Validate that a configuration exists, raise 404 if not.

    Args:
        conn: Database connection
        config_id: Configuration ID to check

    Raises:
        HTTPException: 404 if the configuration doesn't exist
    """
    if not configuration_exists(conn, config_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Configuration not found",
        )


def validate_required_fields_or_400(ota_name: Optional[str], endpoint_url: Optional[str]) -> None:
    """
    Validate that both ota_name and endpoint_url are present and non-blank.

    Raises:
        HTTPException: 400 if either is missing
    """
    if not (ota_name and ota_name.strip()) or not (endpoint_url and endpoint_url.strip()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="OTA name and endpoint URL are required",
        )


def validate_name_available_or_400(
    conn: Connection, ota_name: str, exclude_id: Optional[int] = None
) -> None:
    """
    Validate that no other configuration uses this partner name.

    Args:
        conn: Database connection
        ota_name: Partner name being created or renamed to
        exclude_id: Configuration being updated, allowed to keep its own name

    Raises:
        HTTPException: 400 if another configuration already has the name
    """
    existing = get_configuration_by_name(conn, ota_name)
    if existing is not None and existing["id"] != exclude_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Configuration already exists for this OTA",
        )


def build_update_data(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Keep only the fields the client actually sent.

    Blank ota_name / endpoint_url are rejected since both columns are required.
    """
    update_data = {k: v for k, v in payload.items() if v is not None}

    for field in ("ota_name", "endpoint_url"):
        if field in update_data and not str(update_data[field]).strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{field} cannot be empty",
            )

    return update_data
