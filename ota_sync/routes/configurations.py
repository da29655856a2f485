"""CRUD routes for OTA partner configurations."""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Engine

from ota_sync.auth import require_manager
from ota_sync.db.readers.configurations import get_configuration, list_configurations
from ota_sync.db.writers.configurations import (
    hard_delete_configuration,
    insert_configuration,
    soft_delete_configuration,
    update_configuration,
)
from ota_sync.dependencies import get_db_engine
from ota_sync.partners.registry import is_supported
from ota_sync.routes._configuration_helpers import (
    build_update_data,
    validate_configuration_exists_or_404,
    validate_name_available_or_400,
    validate_required_fields_or_400,
)
from ota_sync.schemas.configurations import (
    ConfigurationCreatedResponse,
    ConfigurationCreatePayload,
    ConfigurationListResponse,
    ConfigurationUpdatePayload,
)

logger = structlog.get_logger(__name__)
router = APIRouter(dependencies=[Depends(require_manager)])


@router.get("/configurations", response_model=ConfigurationListResponse)
def list_configurations_endpoint(db_engine: Engine = Depends(get_db_engine)) -> dict[str, Any]:
    """
    List all OTA configurations, newest first. Credentials are never returned.
    """
    try:
        with db_engine.connect() as conn:
            return {"configurations": list_configurations(conn)}
    except Exception as e:
        logger.exception("configuration_list_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post(
    "/configurations",
    status_code=status.HTTP_201_CREATED,
    response_model=ConfigurationCreatedResponse,
)
def create_configuration(
    payload: ConfigurationCreatePayload,
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Create a configuration for a partner that has none yet.

    Any partner name is accepted; names without an adapter fail at sync time
    with "Unsupported OTA: <name>".

    Args:
        payload: Partner name, endpoint, credentials and sync frequency

    Returns:
        dict: Message and the created configuration (without credentials)
    """
    try:
        validate_required_fields_or_400(payload.ota_name, payload.endpoint_url)
        data = payload.model_dump()
        data["ota_name"] = data["ota_name"].strip()
        data["endpoint_url"] = data["endpoint_url"].strip()

        with db_engine.begin() as conn:
            validate_name_available_or_400(conn, data["ota_name"])
            config_id = insert_configuration(conn, data)
            created = get_configuration(conn, config_id)

        if not is_supported(data["ota_name"]):
            logger.warning("configuration_partner_unsupported", ota_name=data["ota_name"])

        logger.info("configuration_created", config_id=config_id, ota_name=data["ota_name"])
        return {"message": "OTA configuration created successfully", "configuration": created}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("configuration_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/configurations/{config_id}")
def update_configuration_endpoint(
    config_id: int,
    payload: ConfigurationUpdatePayload,
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    """
    Update an existing configuration.

    Fields left out of the payload keep their stored value, so credentials
    do not have to be re-sent.

    Args:
        config_id: Configuration to update
        payload: Fields to update

    Returns:
        dict: Message confirming update
    """
    try:
        with db_engine.begin() as conn:
            validate_configuration_exists_or_404(conn, config_id)

            update_data = build_update_data(payload.model_dump())
            if not update_data:
                return {"message": "No fields to update"}

            if "ota_name" in update_data:
                update_data["ota_name"] = update_data["ota_name"].strip()
                validate_name_available_or_400(conn, update_data["ota_name"], exclude_id=config_id)

            update_configuration(conn, config_id, update_data)

        logger.info(
            "configuration_updated",
            config_id=config_id,
            fields=sorted(k for k in update_data if not k.startswith("api_")),
        )
        return {"message": "OTA configuration updated successfully"}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("configuration_update_failed", config_id=config_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/configurations/{config_id}")
def delete_configuration_endpoint(
    config_id: int,
    soft: bool = Query(False, description="Deactivate (is_active=false) instead of deleting"),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    """
    Delete a configuration, or deactivate it with soft=true.

    Sync log entries of a deleted configuration are kept for audit.
    """
    try:
        with db_engine.begin() as conn:
            validate_configuration_exists_or_404(conn, config_id)

            if soft:
                soft_delete_configuration(conn, config_id)
                logger.info("configuration_deactivated", config_id=config_id)
                message = "OTA configuration deactivated successfully"
            else:
                hard_delete_configuration(conn, config_id)
                logger.info("configuration_deleted", config_id=config_id)
                message = "OTA configuration deleted successfully"

        return {"message": message}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("configuration_deletion_failed", config_id=config_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
