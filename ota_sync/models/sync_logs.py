from sqlalchemy import TIMESTAMP, Column, Enum, Integer, Text, text

from ota_sync.config import SCHEMA
from ota_sync.models.base import Base

SYNC_TYPES = ("availability", "rates", "inventory", "bookings")
SYNC_STATUSES = ("success", "failed", "partial")


class OtaSyncLog(Base):
    """
    ORM model for the append-only sync log.

    configuration_id is deliberately not a foreign key: log rows outlive a
    hard-deleted configuration and stay available for audit.
    """

    __tablename__ = "ota_sync_logs"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    configuration_id = Column(Integer, nullable=True, index=True)
    sync_type = Column(
        Enum(*SYNC_TYPES, name="ota_sync_type", native_enum=False), nullable=False
    )
    status = Column(Enum(*SYNC_STATUSES, name="ota_sync_status", native_enum=False), nullable=False)
    message = Column(Text, nullable=True)
    records_processed = Column(Integer, nullable=False, server_default=text("0"))
    sync_started_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )
    sync_completed_at = Column(TIMESTAMP(timezone=True), nullable=True)
