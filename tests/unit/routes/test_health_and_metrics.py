"""
Unit tests for health, readiness and metrics endpoints.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from ota_sync.metrics import api_latency, api_requests, connection_tests, records_synced, sync_total


@pytest.mark.unit
def test_health_endpoint_returns_ok(api_client: TestClient) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.unit
def test_readiness_endpoint_uses_injected_engine(api_client: TestClient) -> None:
    response = api_client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "checks": {"database": "ok"}}


@pytest.mark.unit
def test_readiness_endpoint_returns_503_when_db_not_accessible(api_client: TestClient) -> None:
    with patch("ota_sync.routes.health.check_engine_health", return_value=False):
        response = api_client.get("/ready")

    assert response.status_code == 503
    assert response.json()["checks"]["database"] == "failed"


@pytest.mark.unit
def test_metrics_endpoint_contains_ota_metrics(api_client: TestClient) -> None:
    """Test that /metrics exposes the partner sync metrics in Prometheus format."""
    sync_total.labels(partner="agoda", status="success").inc()
    records_synced.labels(partner="agoda").inc(3)
    connection_tests.labels(partner="agoda", status="failed").inc()
    api_requests.labels(partner="agoda", status_code="200").inc()
    api_latency.labels(partner="agoda").observe(0.2)

    response = api_client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]
    for name in (
        "ota_syncs_total",
        "ota_records_synced_total",
        "ota_connection_tests_total",
        "ota_api_requests_total",
        "ota_api_latency_seconds",
        "ota_sync_duration_seconds",
        "ota_active_configurations",
    ):
        assert name in response.text
