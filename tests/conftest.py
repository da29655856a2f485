"""
Shared fixtures.

Every test gets its own SQLite database file with all tables created, and an
OtaHttpClient whose requests.Session is a Mock, so no partner is ever called.
"""

from __future__ import annotations

import os

# Settings are read at import time; these must be in place before ota_sync is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
TEST_JWT_SECRET = "test-jwt-secret-for-unit-tests-only-0001"
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["DB_SCHEMA"] = ""

from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Generator, Optional
from unittest.mock import Mock

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, insert
from sqlalchemy.engine import Engine

from ota_sync.db.writers.configurations import insert_configuration
from ota_sync.dependencies import get_db_engine, get_http_client
from ota_sync.main import app
from ota_sync.models.base import Base
from ota_sync.models.hotel import Booking, Room, RoomCategory, User
from ota_sync.network.client import OtaHttpClient
from ota_sync.utils.datetime import utc_now


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """SQLite engine with every table created, shared safely across threads."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ota.db'}",
        future=True,
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def make_response() -> Callable[..., Mock]:
    """Build a mocked requests.Response."""

    def _make(
        status_code: int = 200,
        body: Any = None,
        content_type: str = "application/json",
        text: Optional[str] = None,
    ) -> Mock:
        res = Mock(status_code=status_code)
        res.headers = {"Content-Type": content_type}
        res.json.return_value = body if body is not None else {}
        res.text = text if text is not None else str(body or "")
        res.iter_content.side_effect = lambda chunk_size=1: iter([res.text.encode("utf-8")])
        return res

    return _make


@pytest.fixture
def mock_session(make_response: Callable[..., Mock]) -> Mock:
    """requests.Session stand-in answering 200 {} to every call by default."""
    session = Mock()
    session.request.return_value = make_response(200, {"status": "ok"})
    return session


@pytest.fixture
def http_client(mock_session: Mock) -> OtaHttpClient:
    return OtaHttpClient(session=mock_session, retry_delay=0)


@pytest.fixture
def add_configuration(db_engine: Engine) -> Callable[..., int]:
    """Insert an OTA configuration and return its id."""

    def _add(ota_name: str, **fields: Any) -> int:
        data = {
            "ota_name": ota_name,
            "endpoint_url": f"https://{ota_name.replace('.', '-')}.example.test/ari",
            "hotel_id": "H-100",
            **fields,
        }
        with db_engine.begin() as conn:
            return insert_configuration(conn, data)

    return _add


@pytest.fixture
def add_room(db_engine: Engine) -> Callable[..., int]:
    """Insert a room (and its category on first use) and return the room id."""

    def _add(
        room_id: int,
        room_name: str = "Deluxe King",
        price: str = "120.00",
        is_active: bool = True,
        category: Optional[str] = "Deluxe",
        max_occupancy: int = 2,
        description: Optional[str] = None,
    ) -> int:
        with db_engine.begin() as conn:
            category_id = None
            if category is not None:
                category_id = conn.execute(
                    insert(RoomCategory).values(name=category)
                ).inserted_primary_key[0]
            conn.execute(
                insert(Room).values(
                    id=room_id,
                    room_number=str(100 + room_id),
                    room_name=room_name,
                    description=description,
                    room_category_id=category_id,
                    price_per_night=Decimal(price),
                    max_occupancy=max_occupancy,
                    is_active=is_active,
                )
            )
        return room_id

    return _add


@pytest.fixture
def add_booking(db_engine: Engine) -> Callable[..., None]:
    """Insert a booking covering [check_in, check_out)."""

    def _add(room_id: int, check_in: date, check_out: date, status: str = "confirmed") -> None:
        with db_engine.begin() as conn:
            conn.execute(
                insert(Booking).values(
                    room_id=room_id,
                    check_in_date=check_in,
                    check_out_date=check_out,
                    booking_status=status,
                )
            )

    return _add


def make_token(user_id: int, secret: str = TEST_JWT_SECRET, expires_in: int = 3600) -> str:
    claims = {"userId": user_id, "exp": utc_now() + timedelta(seconds=expires_in)}
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture
def add_user(db_engine: Engine) -> Callable[..., int]:
    def _add(user_id: int, role: str = "manager", is_active: bool = True) -> int:
        with db_engine.begin() as conn:
            conn.execute(
                insert(User).values(
                    id=user_id, username=f"user{user_id}", role=role, is_active=is_active
                )
            )
        return user_id

    return _add


@pytest.fixture
def token_for() -> Callable[..., str]:
    return make_token


@pytest.fixture
def auth_headers(add_user: Callable[..., int]) -> dict[str, str]:
    """Bearer headers for an active manager."""
    user_id = add_user(1, role="manager")
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def api_client(db_engine: Engine, http_client: OtaHttpClient) -> Generator[TestClient, None, None]:
    """TestClient wired to the per-test database and the mocked partner session."""
    app.dependency_overrides[get_db_engine] = lambda: db_engine
    app.dependency_overrides[get_http_client] = lambda: http_client
    yield TestClient(app)
    app.dependency_overrides.clear()
