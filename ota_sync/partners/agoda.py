"""Agoda ARI adapter: JSON body, bearer token and X-Hotel-Id header."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

import requests

from ota_sync.partners.base import PartnerAdapter, bearer_headers
from ota_sync.partners.types import PartnerConfig, PartnerKind, RoomAvailability
from ota_sync.utils.datetime import epoch_millis, utc_today

RATE_PLAN = "Standard"


def json_amount(value: Decimal) -> float:
    return float(value)


def build_ari_payload(
    config: PartnerConfig,
    rooms: list[RoomAvailability],
    today: Optional[date] = None,
    request_id: Optional[str] = None,
) -> dict[str, Any]:
    """
    Build the Agoda ARI request body.

    Args:
        config: Partner configuration
        rooms: Availability snapshot
        today: Rate date, defaults to the current UTC date
        request_id: Defaults to "agoda_<epoch-ms>"

    Returns:
        dict: JSON-serializable payload
    """
    day = (today or utc_today()).isoformat()

    return {
        "HotelId": config.hotel_id,
        "RequestId": request_id or f"agoda_{epoch_millis()}",
        "Rooms": [
            {
                "RoomId": room.room_id,
                "RoomType": room.room_name,
                "Rates": [
                    {
                        "RatePlan": RATE_PLAN,
                        "Rate": json_amount(room.price_per_night),
                        "Date": day,
                        "Availability": 1 if room.is_available else 0,
                        "Inventory": 1,
                    }
                ],
            }
            for room in rooms
        ],
    }


class AgodaAdapter(PartnerAdapter):
    kind = PartnerKind.AGODA
    display_name = "Agoda"

    def send_ari(self, config: PartnerConfig, rooms: list[RoomAvailability]) -> requests.Response:
        headers = bearer_headers(config.credentials.api_key, "application/json")
        headers["X-Hotel-Id"] = config.hotel_id or ""

        return self.client.post(
            config.endpoint_url,
            partner=self.kind.value,
            timeout=self.sync_timeout,
            headers=headers,
            json=build_ari_payload(config, rooms),
        )

    def probe(self, config: PartnerConfig) -> requests.Response:
        return self.client.post(
            config.endpoint_url,
            partner=self.kind.value,
            timeout=self.test_timeout,
            headers=bearer_headers(config.credentials.api_key, "application/json"),
            json={"HotelId": config.hotel_id, "RequestId": f"test_{epoch_millis()}"},
        )
