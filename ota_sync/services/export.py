"""Generic OTA-style XML export of the current availability snapshot."""

import xml.etree.ElementTree as ET
from datetime import date
from typing import Optional

import structlog
from sqlalchemy.engine import Engine

from ota_sync.config import HOTEL_NAME
from ota_sync.partners.types import PartnerConfig, RoomAvailability
from ota_sync.partners.xml_builder import text_element, to_xml_bytes
from ota_sync.services.snapshot import build_snapshot
from ota_sync.services.sync import load_partner_config
from ota_sync.utils.datetime import utc_today

logger = structlog.get_logger(__name__)

XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"


def build_export_document(
    config: PartnerConfig,
    rooms: list[RoomAvailability],
    hotel_name: str = HOTEL_NAME,
) -> bytes:
    """
    Render rooms as an <ota_export> document.

    Example:
        <ota_export xmlns:xsi="..." version="1.0">
          <hotel id="H1">
            <name>Grand Hotel</name>
            <rooms>
              <room id="7">
                <name>Deluxe</name><category>Suite</category><capacity>2</capacity>
                <rate>100.00</rate><availability>available</availability>
                <description /><amenities />
              </room>
            </rooms>
          </hotel>
        </ota_export>
    """
    root = ET.Element("ota_export", {"xmlns:xsi": XSI_NAMESPACE, "version": "1.0"})
    hotel = ET.SubElement(root, "hotel", {"id": config.hotel_id or ""})
    text_element(hotel, "name", hotel_name)
    rooms_el = ET.SubElement(hotel, "rooms")

    for room in rooms:
        room_el = ET.SubElement(rooms_el, "room", {"id": str(room.room_id)})
        text_element(room_el, "name", room.room_name)
        text_element(room_el, "category", room.category_name)
        text_element(room_el, "capacity", room.max_occupancy)
        text_element(room_el, "rate", room.price_per_night)
        text_element(room_el, "availability", "available" if room.is_available else "unavailable")
        text_element(room_el, "description", room.description)
        ET.SubElement(room_el, "amenities")

    return to_xml_bytes(root, indent="  ")


def export_filename(config: PartnerConfig, day: Optional[date] = None) -> str:
    return f"ota_export_{config.ota_name}_{(day or utc_today()).isoformat()}.xml"


def export_snapshot_xml(engine: Engine, config_id: int) -> tuple[str, bytes]:
    """
    Export the current snapshot for a configuration, active or not.

    This is not a live sync: nothing is sent and no log entry is written.

    Returns:
        tuple[str, bytes]: Attachment filename and XML document

    Raises:
        ConfigNotFound: If the configuration does not exist
    """
    config = load_partner_config(engine, config_id, require_active=False)
    rooms = build_snapshot(engine)

    logger.info("snapshot_exported", config_id=config.id, rooms=len(rooms))
    return export_filename(config), build_export_document(config, rooms)
