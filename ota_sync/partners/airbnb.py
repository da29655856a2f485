"""Airbnb ARI adapter: JSON operations list, bearer token and API version header."""

from datetime import date
from typing import Any, Optional

import requests

from ota_sync.config import DEFAULT_CURRENCY
from ota_sync.partners.agoda import json_amount
from ota_sync.partners.base import PartnerAdapter, bearer_headers
from ota_sync.partners.types import PartnerConfig, PartnerKind, RoomAvailability
from ota_sync.utils.datetime import utc_today

API_VERSION = "1.0"


def build_ari_payload(
    config: PartnerConfig,
    rooms: list[RoomAvailability],
    today: Optional[date] = None,
) -> dict[str, Any]:
    """Build the Airbnb availability operations for the listing in config.hotel_id."""
    day = (today or utc_today()).isoformat()

    return {
        "listing_id": config.hotel_id,
        "operations": [
            {
                "room_id": str(room.room_id),
                "availability": room.is_available,
                "price": {"amount": json_amount(room.price_per_night), "currency": DEFAULT_CURRENCY},
                "date": day,
                "minimum_nights": 1,
            }
            for room in rooms
        ],
    }


class AirbnbAdapter(PartnerAdapter):
    kind = PartnerKind.AIRBNB
    display_name = "Airbnb"

    def _headers(self, config: PartnerConfig, content_type: Optional[str] = None) -> dict[str, str]:
        headers = bearer_headers(config.credentials.api_key, content_type)
        headers["X-Airbnb-API-Version"] = API_VERSION
        return headers

    def send_ari(self, config: PartnerConfig, rooms: list[RoomAvailability]) -> requests.Response:
        return self.client.post(
            config.endpoint_url,
            partner=self.kind.value,
            timeout=self.sync_timeout,
            headers=self._headers(config, "application/json"),
            json=build_ari_payload(config, rooms),
        )

    def probe(self, config: PartnerConfig) -> requests.Response:
        return self.client.get(
            f"{config.endpoint_url.rstrip('/')}/test",
            partner=self.kind.value,
            timeout=self.test_timeout,
            headers=self._headers(config),
        )
