"""
Value objects passed between the snapshot builder, the partner adapters and
the sync orchestrator.

These are internal result objects; routers convert them into HTTP responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class PartnerKind(str, Enum):
    """Closed set of partner kinds an adapter exists for (plus OTHER)."""

    BOOKING_COM = "booking_com"
    AGODA = "agoda"
    AIRBNB = "airbnb"
    OTHER = "other"

    @classmethod
    def from_name(cls, partner_name: str) -> "PartnerKind":
        """
        Map a stored ota_name onto a partner kind.

        Names are compared case-insensitively and "booking.com" is accepted as
        an alias of booking_com. Anything unrecognised maps to OTHER.

        Example:
            >>> PartnerKind.from_name(" Booking.com ")
            <PartnerKind.BOOKING_COM: 'booking_com'>
        """
        normalized = normalize_partner_name(partner_name)
        for kind in cls:
            if kind.value == normalized:
                return kind
        return cls.OTHER


_ALIASES = {"booking.com": "booking_com"}


def normalize_partner_name(partner_name: str) -> str:
    name = (partner_name or "").strip().lower()
    return _ALIASES.get(name, name)


@dataclass(frozen=True)
class PartnerCredentials:
    """Secret half of a configuration. Never logged, never serialized to clients."""

    api_key: Optional[str] = None
    api_username: Optional[str] = None
    api_password: Optional[str] = None

    def __repr__(self) -> str:
        def mask(value: Optional[str]) -> str:
            return "None" if value is None else "'***'"

        return (
            f"PartnerCredentials(api_key={mask(self.api_key)}, "
            f"api_username={mask(self.api_username)}, "
            f"api_password={mask(self.api_password)})"
        )


@dataclass
class PartnerConfig:
    """A partner configuration as seen by the adapters."""

    id: int
    ota_name: str
    endpoint_url: str
    hotel_id: Optional[str] = None
    is_active: bool = True
    last_sync_at: Optional[datetime] = None
    sync_frequency: int = 60
    credentials: PartnerCredentials = field(default_factory=PartnerCredentials, repr=False)

    @property
    def kind(self) -> PartnerKind:
        return PartnerKind.from_name(self.ota_name)


@dataclass
class RoomAvailability:
    """Availability of one active room for the snapshot date."""

    room_id: int
    room_name: str
    price_per_night: Decimal
    max_occupancy: int
    is_available: bool
    category_name: Optional[str] = None
    description: Optional[str] = None


@dataclass
class SyncOutcome:
    """
    Result of one sync attempt.

    ota_name is the configuration's name as loaded for the attempt; the
    orchestrator fills it in, adapters leave it unset.
    """

    success: bool
    message: str
    raw_response: Any = None
    ota_name: Optional[str] = None


@dataclass
class ConnectionOutcome:
    success: bool
    message: str
    ota_name: Optional[str] = None


@dataclass
class PartnerSyncResult:
    """One partner's entry in the result of a bulk sync."""

    configuration_id: int
    ota_name: str
    success: bool
    message: str


@dataclass
class AggregateOutcome:
    total: int
    succeeded: int
    failed: int
    results: list[PartnerSyncResult] = field(default_factory=list)
