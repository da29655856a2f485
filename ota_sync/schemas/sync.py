from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SyncResponse(BaseModel):
    message: str
    success: bool
    details: str
    ota_name: str
    synced_at: datetime


class PartnerResultOut(BaseModel):
    ota_name: str
    success: bool
    message: str


class SyncAllResponse(BaseModel):
    message: str
    total_otas: int
    successful_syncs: int
    failed_syncs: int
    results: list[PartnerResultOut]
    synced_at: datetime


class ConnectionTestResponse(BaseModel):
    ota_name: str
    success: bool
    message: str
    tested_at: datetime


class SyncLogOut(BaseModel):
    id: int
    configuration_id: Optional[int] = None
    ota_name: Optional[str] = None  # None once the configuration is deleted
    sync_type: str
    status: str
    message: Optional[str] = None
    records_processed: int
    sync_started_at: Optional[datetime] = None
    sync_completed_at: Optional[datetime] = None


class SyncLogsResponse(BaseModel):
    logs: list[SyncLogOut]
    page: int
    limit: int
    total: int


class SyncStatOut(BaseModel):
    configuration_id: int
    ota_name: str
    total_syncs: int
    successful_syncs: int
    failed_syncs: int
    last_sync_at: Optional[datetime] = None
    total_records_processed: int


class SyncStatsResponse(BaseModel):
    period: str
    stats: list[SyncStatOut]
