"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP ota_syncs_total Partner sync attempts by outcome
        # TYPE ota_syncs_total counter
        ota_syncs_total{partner="agoda",status="success"} 12.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """Expose partner sync, connection test and outbound request metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
