"""Booking.com ARI adapter: XML body over HTTP Basic auth."""

import xml.etree.ElementTree as ET

import requests

from ota_sync.partners.base import PartnerAdapter, basic_auth_header
from ota_sync.partners.types import PartnerConfig, PartnerKind, RoomAvailability
from ota_sync.partners.xml_builder import dict_element, text_element, to_xml_bytes

ROOM_INVENTORY = 1
DEFAULT_RESTRICTIONS = {
    "min_stay": 1,
    "max_stay": 30,
    "closed_to_arrival": 0,
    "closed_to_departure": 0,
}


def _authenticated_root(tag: str, config: PartnerConfig) -> ET.Element:
    root = ET.Element(tag)
    dict_element(
        root,
        "authentication",
        {
            "username": config.credentials.api_username,
            "password": config.credentials.api_password,
        },
    )
    text_element(root, "hotel_id", config.hotel_id)
    return root


def build_ari_update(config: PartnerConfig, rooms: list[RoomAvailability]) -> bytes:
    """
    Render the <ari_update> document.

    Each room becomes one repeated <rooms> element directly under the root.

    Example:
        <ari_update>
          <authentication><username>u</username><password>p</password></authentication>
          <hotel_id>H1</hotel_id>
          <rooms>
            <room_id>7</room_id><room_name>Deluxe</room_name><rate>100.00</rate>
            <availability>1</availability><inventory>1</inventory>
            <restrictions>...</restrictions>
          </rooms>
        </ari_update>
    """
    root = _authenticated_root("ari_update", config)

    for room in rooms:
        dict_element(
            root,
            "rooms",
            {
                "room_id": room.room_id,
                "room_name": room.room_name,
                "rate": room.price_per_night,
                "availability": 1 if room.is_available else 0,
                "inventory": ROOM_INVENTORY,
                "restrictions": DEFAULT_RESTRICTIONS,
            },
        )

    return to_xml_bytes(root)


def build_test_connection(config: PartnerConfig) -> bytes:
    return to_xml_bytes(_authenticated_root("test_connection", config))


class BookingComAdapter(PartnerAdapter):
    kind = PartnerKind.BOOKING_COM
    display_name = "Booking.com"

    def _headers(self, config: PartnerConfig) -> dict[str, str]:
        return {
            "Content-Type": "application/xml",
            "Authorization": basic_auth_header(
                config.credentials.api_username, config.credentials.api_password
            ),
        }

    def send_ari(self, config: PartnerConfig, rooms: list[RoomAvailability]) -> requests.Response:
        return self.client.post(
            config.endpoint_url,
            partner=self.kind.value,
            timeout=self.sync_timeout,
            headers=self._headers(config),
            data=build_ari_update(config, rooms),
        )

    def probe(self, config: PartnerConfig) -> requests.Response:
        return self.client.post(
            config.endpoint_url,
            partner=self.kind.value,
            timeout=self.test_timeout,
            headers=self._headers(config),
            data=build_test_connection(config),
        )
