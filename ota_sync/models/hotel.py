"""
Read-only mappings of the hotel tables owned by the booking backend.

The sync service never writes to these tables; they are mapped so that the
availability snapshot and the capability gate can query them. Migrations in
this repository do not manage them.
"""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, Numeric, String, Text

from ota_sync.config import SCHEMA
from ota_sync.models.base import Base, qualified

ACTIVE_BOOKING_STATUSES = ("pending", "confirmed")


class RoomCategory(Base):
    __tablename__ = "room_categories"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)


class Room(Base):
    """A sellable room. Only rows with is_active are pushed to partners."""

    __tablename__ = "rooms"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True)
    room_number = Column(String(20), nullable=False, unique=True)
    room_name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    room_category_id = Column(Integer, ForeignKey(f"{qualified('room_categories')}.id"))
    price_per_night = Column(Numeric(10, 2), nullable=False)
    max_occupancy = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True)


class Booking(Base):
    """A stay on a room over the half-open interval [check_in_date, check_out_date)."""

    __tablename__ = "bookings"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True)
    room_id = Column(Integer, ForeignKey(f"{qualified('rooms')}.id"), index=True)
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    booking_status = Column(String(20), nullable=False, default="pending")


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True)
    username = Column(String(100), nullable=False, unique=True)
    role = Column(String(20), nullable=False, default="staff")
    is_active = Column(Boolean, nullable=False, default=True)
