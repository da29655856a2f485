"""Availability snapshot of the active rooms, computed from bookings."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.engine import Engine

from ota_sync.models.hotel import ACTIVE_BOOKING_STATUSES, Booking, Room, RoomCategory
from ota_sync.partners.types import RoomAvailability
from ota_sync.utils.datetime import utc_today

logger = structlog.get_logger(__name__)


def build_snapshot(engine: Engine, today: Optional[date] = None) -> list[RoomAvailability]:
    """
    Compute today's availability for every active room.

    A room is unavailable when a pending or confirmed booking covers today,
    using the half-open stay interval [check_in_date, check_out_date): a guest
    checking out today does not block the room.

    Args:
        engine: SQLAlchemy Engine
        today: Date to evaluate, defaults to the current UTC date

    Returns:
        list[RoomAvailability]: One record per active room, ordered by room id
    """
    day = today or utc_today()

    occupied = (
        select(Booking.id)
        .where(
            Booking.room_id == Room.id,
            Booking.booking_status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.check_in_date <= day,
            Booking.check_out_date > day,
        )
        .exists()
    )

    stmt = (
        select(
            Room.id,
            Room.room_name,
            Room.price_per_night,
            Room.max_occupancy,
            Room.description,
            RoomCategory.name.label("category_name"),
            (~occupied).label("is_available"),
        )
        .select_from(Room)
        .outerjoin(RoomCategory, Room.room_category_id == RoomCategory.id)
        .where(Room.is_active.is_(True))
        .order_by(Room.id)
    )

    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()

    snapshot = [
        RoomAvailability(
            room_id=row["id"],
            room_name=row["room_name"],
            price_per_night=Decimal(str(row["price_per_night"])),
            max_occupancy=row["max_occupancy"],
            is_available=bool(row["is_available"]),
            category_name=row["category_name"],
            description=row["description"],
        )
        for row in rows
    ]

    logger.info(
        "snapshot_built",
        date=day.isoformat(),
        rooms=len(snapshot),
        available=sum(1 for r in snapshot if r.is_available),
    )
    return snapshot
