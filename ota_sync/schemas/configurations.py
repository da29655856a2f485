from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ConfigurationCreatePayload(BaseModel):
    """
    Schema for creating an OTA configuration.

    ota_name and endpoint_url are validated by the route so that a missing
    value answers 400 rather than 422.
    """

    ota_name: Optional[str] = Field(None, description="Partner name, e.g. booking_com, agoda, airbnb")
    api_key: Optional[str] = Field(None, description="Bearer token (Agoda, Airbnb)")
    api_username: Optional[str] = Field(None, description="Basic auth username (Booking.com)")
    api_password: Optional[str] = Field(None, description="Basic auth password (Booking.com)")
    endpoint_url: Optional[str] = Field(None, description="Partner ARI endpoint")
    hotel_id: Optional[str] = Field(None, description="Partner-side hotel or listing id")
    sync_frequency: int = Field(60, ge=1, description="Sync interval in minutes (informational)")


class ConfigurationUpdatePayload(BaseModel):
    """
    Schema for updating a configuration. All fields are optional; omitted
    fields, secrets included, keep their stored value.
    Note: last_sync_at is automatically managed by the system.
    """

    ota_name: Optional[str] = None
    api_key: Optional[str] = None
    api_username: Optional[str] = None
    api_password: Optional[str] = None
    endpoint_url: Optional[str] = None
    hotel_id: Optional[str] = None
    sync_frequency: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None


class ConfigurationOut(BaseModel):
    """Configuration as returned to clients. Credentials are never included."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    ota_name: str
    endpoint_url: str
    hotel_id: Optional[str] = None
    is_active: bool
    last_sync_at: Optional[datetime] = None
    sync_frequency: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ConfigurationListResponse(BaseModel):
    configurations: list[ConfigurationOut]


class ConfigurationCreatedResponse(BaseModel):
    message: str
    configuration: ConfigurationOut
