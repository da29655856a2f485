"""
FastAPI dependency injection providers.

This module contains dependency providers for FastAPI routes, enabling better
testability through dependency injection and following FastAPI best practices.

Dependencies can be overridden in tests using app.dependency_overrides, making
it easy to inject a SQLite engine or an HTTP client with a mocked session.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Generator

from fastapi import Depends
from sqlalchemy.engine import Engine

from ota_sync.db.engine import engine
from ota_sync.network.client import OtaHttpClient
from ota_sync.services.sync import SyncOrchestrator


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine

    Testing Example:
        >>> app.dependency_overrides[get_db_engine] = lambda: sqlite_engine
        >>> client = TestClient(app)
        >>> client.get("/api/ota/configurations", headers=auth_headers)
    """
    yield engine


@lru_cache(maxsize=1)
def get_http_client() -> OtaHttpClient:
    """
    Provide the process-wide partner HTTP client.

    Created on first use and reused for every request and every concurrent
    sync leg; closed on application shutdown.
    """
    return OtaHttpClient()


def get_orchestrator(
    db_engine: Engine = Depends(get_db_engine),
    client: OtaHttpClient = Depends(get_http_client),
) -> SyncOrchestrator:
    """Build a SyncOrchestrator bound to the injected engine and HTTP client."""
    return SyncOrchestrator(db_engine, client)
