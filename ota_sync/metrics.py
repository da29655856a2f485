"""
Prometheus metrics for monitoring partner syncs and partner API calls.

This module defines all Prometheus metrics used throughout the application for
observability and monitoring. Metrics are exposed via the /metrics endpoint for
scraping by Prometheus.

Metric Types:
    - Counter: Cumulative metrics that only increase (e.g., total API requests)
    - Histogram: Observations bucketed by value (e.g., request latency)
    - Gauge: Point-in-time value that can go up or down (e.g., active configurations)

Example:
    >>> from ota_sync.metrics import sync_duration, records_synced
    >>> with sync_duration.labels(partner="agoda").time():
    ...     outcome = adapter.sync(config, rooms)
    ...     records_synced.labels(partner="agoda").inc(len(rooms))
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# =============================================================================
# Sync Metrics
# =============================================================================

sync_total = Counter(
    "ota_syncs_total",
    "Total number of partner sync attempts (success and failure)",
    ["partner", "status"],
)
"""
Counter for partner sync attempts.

Labels:
    partner: Normalized partner name (booking_com, agoda, airbnb, ...)
    status: success or failed
"""

sync_duration = Histogram(
    "ota_sync_duration_seconds",
    "Duration of a single partner sync in seconds",
    ["partner"],
    buckets=(0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0, 30.0, 60.0, float("inf")),
)

records_synced = Counter(
    "ota_records_synced_total",
    "Total number of room records pushed to partners",
    ["partner"],
)

connection_tests = Counter(
    "ota_connection_tests_total",
    "Total number of partner connection tests",
    ["partner", "status"],
)

# =============================================================================
# API Metrics
# =============================================================================

api_requests = Counter(
    "ota_api_requests_total",
    "Total HTTP requests made to partner endpoints",
    ["partner", "status_code"],
)
"""
Counter for partner API requests.

Labels:
    partner: Partner kind value (booking_com, agoda, airbnb), as on the sync metrics
    status_code: HTTP status code, or "error" for transport failures
"""

api_latency = Histogram(
    "ota_api_latency_seconds",
    "Partner API request latency in seconds",
    ["partner"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, float("inf")),
)

# =============================================================================
# System Metrics
# =============================================================================

active_configurations = Gauge(
    "ota_active_configurations",
    "Number of active OTA configurations seen by the last bulk sync",
)
