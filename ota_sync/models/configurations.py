"""SQLAlchemy model for OTA partner configurations."""

from sqlalchemy import TIMESTAMP, Boolean, Column, Integer, String, text

from ota_sync.config import SCHEMA
from ota_sync.models.base import Base


class OtaConfiguration(Base):
    """
    ORM model for a connected OTA partner (Booking.com, Agoda, Airbnb, ...).

    One row per partner; ota_name is unique. Credentials are stored on the row
    but are only ever read through get_partner_credentials().
    last_sync_at advances after every dispatched sync attempt.
    """

    __tablename__ = "ota_configurations"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    ota_name = Column(String(100), nullable=False, unique=True)
    api_key = Column(String(255), nullable=True)
    api_username = Column(String(255), nullable=True)
    api_password = Column(String(255), nullable=True)
    endpoint_url = Column(String(255), nullable=False)
    hotel_id = Column(String(100), nullable=True)  # Partner-side property/listing id
    is_active = Column(Boolean, nullable=False, server_default=text("TRUE"))
    last_sync_at = Column(TIMESTAMP(timezone=True), nullable=True)
    sync_frequency = Column(Integer, nullable=False, server_default=text("60"))  # minutes
    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )
    updated_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )
