"""Sync, connection test, log and export routes."""

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.engine import Engine

from ota_sync.auth import require_manager
from ota_sync.db.readers.sync_logs import count_sync_logs, get_sync_stats, list_sync_logs
from ota_sync.dependencies import get_db_engine, get_orchestrator
from ota_sync.errors import ConfigInactive, ConfigNotFound, NoActiveConfigurations
from ota_sync.schemas.sync import (
    ConnectionTestResponse,
    SyncAllResponse,
    SyncLogsResponse,
    SyncResponse,
    SyncStatsResponse,
)
from ota_sync.services.export import export_snapshot_xml
from ota_sync.services.sync import SyncOrchestrator
from ota_sync.utils.datetime import utc_now

logger = structlog.get_logger(__name__)
router = APIRouter(dependencies=[Depends(require_manager)])


@router.post("/sync/{config_id}", response_model=SyncResponse)
def sync_configuration(
    config_id: int,
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """
    Push the current availability snapshot to one active partner.

    A partner rejection is not an HTTP error: the response carries
    success=false and the partner's message in details.

    Args:
        config_id: Active configuration to sync

    Returns:
        dict: Outcome, partner name and timestamp
    """
    try:
        outcome = orchestrator.sync_one(config_id)

        return {
            "message": "Sync completed successfully" if outcome.success else "Sync failed",
            "success": outcome.success,
            "details": outcome.message,
            "ota_name": outcome.ota_name,
            "synced_at": utc_now(),
        }

    except (ConfigNotFound, ConfigInactive):
        raise HTTPException(status_code=404, detail="Active OTA configuration not found")
    except Exception as e:
        logger.exception("sync_request_failed", config_id=config_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/sync-all", response_model=SyncAllResponse)
def sync_all_configurations(
    timeout: Optional[float] = Query(
        None, gt=0, description="Seconds to wait before reporting unfinished partners as failed"
    ),
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """
    Sync every active partner concurrently against one snapshot.

    Returns:
        dict: Counts and one result per active configuration
    """
    try:
        if timeout is None:
            summary = orchestrator.sync_all()
        else:
            summary = orchestrator.sync_all(deadline=timeout)

        return {
            "message": f"Sync completed: {summary.succeeded} successful, {summary.failed} failed",
            "total_otas": summary.total,
            "successful_syncs": summary.succeeded,
            "failed_syncs": summary.failed,
            "results": [
                {"ota_name": r.ota_name, "success": r.success, "message": r.message}
                for r in summary.results
            ],
            "synced_at": utc_now(),
        }

    except NoActiveConfigurations as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("sync_all_request_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/sync-logs", response_model=SyncLogsResponse)
def get_sync_logs(
    ota_id: Optional[int] = Query(None, description="Only entries of this configuration"),
    limit: int = Query(50, ge=1, le=500),
    page: int = Query(1, ge=1),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    List sync log entries, newest first.

    Entries of deleted configurations are included with ota_name set to null.
    """
    try:
        with db_engine.connect() as conn:
            logs = list_sync_logs(conn, config_id=ota_id, limit=limit, page=page)
            total = count_sync_logs(conn, config_id=ota_id)

        return {"logs": logs, "page": page, "limit": limit, "total": total}

    except Exception as e:
        logger.exception("sync_logs_request_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/test-connection/{config_id}", response_model=ConnectionTestResponse)
def test_configuration_connection(
    config_id: int,
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """
    Probe a partner with the stored credentials.

    Deactivated configurations can be tested. Nothing is logged or updated.
    """
    try:
        outcome = orchestrator.test_connection(config_id)

        return {
            "ota_name": outcome.ota_name,
            "success": outcome.success,
            "message": outcome.message,
            "tested_at": utc_now(),
        }

    except ConfigNotFound:
        raise HTTPException(status_code=404, detail="OTA configuration not found")
    except Exception as e:
        logger.exception("connection_test_request_failed", config_id=config_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/sync-stats", response_model=SyncStatsResponse)
def get_statistics(
    period: str = Query("week", description="week, month, year or all"),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Per-configuration sync counts over a trailing window, active configurations only."""
    try:
        with db_engine.connect() as conn:
            stats = get_sync_stats(conn, period=period)
        return {"period": period, "stats": stats}

    except Exception as e:
        logger.exception("sync_stats_request_failed", period=period, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/export-xml/{config_id}")
def export_xml(
    config_id: int,
    db_engine: Engine = Depends(get_db_engine),
) -> Response:
    """
    Download the current availability snapshot as an XML attachment.

    Not a live sync: nothing is sent to the partner and no log entry is written.
    """
    try:
        filename, document = export_snapshot_xml(db_engine, config_id)
        return Response(
            content=document,
            media_type="application/xml",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    except ConfigNotFound:
        raise HTTPException(status_code=404, detail="OTA configuration not found")
    except Exception as e:
        logger.exception("export_request_failed", config_id=config_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
