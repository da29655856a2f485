import base64
import xml.etree.ElementTree as ET
from decimal import Decimal
from typing import Callable
from unittest.mock import Mock

import pytest
import requests

from ota_sync.network.client import OtaHttpClient
from ota_sync.partners.booking_com import BookingComAdapter, build_ari_update, build_test_connection
from ota_sync.partners.types import PartnerConfig, PartnerCredentials, RoomAvailability


@pytest.fixture
def config() -> PartnerConfig:
    return PartnerConfig(
        id=1,
        ota_name="booking_com",
        endpoint_url="https://booking.example.test/ari",
        hotel_id="H1",
        credentials=PartnerCredentials(api_username="u", api_password="p"),
    )


@pytest.fixture
def rooms() -> list[RoomAvailability]:
    return [
        RoomAvailability(7, "Deluxe", Decimal("100.00"), 2, True, "Suite"),
        RoomAvailability(8, "Twin", Decimal("80.50"), 2, False, None),
    ]


@pytest.mark.unit
def test_build_ari_update_renders_one_rooms_element_per_room(
    config: PartnerConfig, rooms: list[RoomAvailability]
) -> None:
    """Each room is a repeated <rooms> element under <ari_update>."""
    document = build_ari_update(config, rooms)
    root = ET.fromstring(document)

    assert document.startswith(b"<?xml")
    assert root.tag == "ari_update"
    assert root.findtext("authentication/username") == "u"
    assert root.findtext("authentication/password") == "p"
    assert root.findtext("hotel_id") == "H1"

    room_elements = root.findall("rooms")
    assert len(room_elements) == 2
    first, second = room_elements
    assert first.findtext("room_id") == "7"
    assert first.findtext("room_name") == "Deluxe"
    assert first.findtext("rate") == "100.00"
    assert first.findtext("availability") == "1"
    assert first.findtext("inventory") == "1"
    assert first.findtext("restrictions/min_stay") == "1"
    assert first.findtext("restrictions/max_stay") == "30"
    assert first.findtext("restrictions/closed_to_arrival") == "0"
    assert first.findtext("restrictions/closed_to_departure") == "0"
    assert second.findtext("availability") == "0"


@pytest.mark.unit
def test_build_ari_update_with_empty_snapshot(config: PartnerConfig) -> None:
    root = ET.fromstring(build_ari_update(config, []))

    assert root.findall("rooms") == []
    assert root.findtext("hotel_id") == "H1"


@pytest.mark.unit
def test_build_test_connection_has_authentication_and_hotel(config: PartnerConfig) -> None:
    root = ET.fromstring(build_test_connection(config))

    assert root.tag == "test_connection"
    assert root.findtext("authentication/username") == "u"
    assert root.findtext("hotel_id") == "H1"


@pytest.mark.unit
def test_sync_posts_xml_with_basic_auth(
    config: PartnerConfig,
    rooms: list[RoomAvailability],
    http_client: OtaHttpClient,
    mock_session: Mock,
    make_response: Callable[..., Mock],
) -> None:
    mock_session.request.return_value = make_response(
        200, content_type="application/xml", text="<ok/>"
    )

    outcome = BookingComAdapter(http_client).sync(config, rooms)

    assert outcome.success is True
    assert outcome.message == "Booking.com ARI sync completed successfully"
    assert outcome.raw_response == "<ok/>"

    args, kwargs = mock_session.request.call_args
    assert args == ("POST", "https://booking.example.test/ari")
    assert kwargs["headers"]["Content-Type"] == "application/xml"
    expected = base64.b64encode(b"u:p").decode("ascii")
    assert kwargs["headers"]["Authorization"] == f"Basic {expected}"
    assert ET.fromstring(kwargs["data"]).tag == "ari_update"


@pytest.mark.unit
def test_sync_reports_partner_rejection(
    config: PartnerConfig,
    rooms: list[RoomAvailability],
    http_client: OtaHttpClient,
    mock_session: Mock,
    make_response: Callable[..., Mock],
) -> None:
    mock_session.request.return_value = make_response(401)

    outcome = BookingComAdapter(http_client).sync(config, rooms)

    assert outcome.success is False
    assert outcome.message == "Booking.com sync failed: Request failed with status code 401"


@pytest.mark.unit
def test_test_connection_failure_message(
    config: PartnerConfig, http_client: OtaHttpClient, mock_session: Mock
) -> None:
    mock_session.request.side_effect = requests.ConnectionError("connection refused")

    outcome = BookingComAdapter(http_client).test_connection(config)

    assert outcome.success is False
    assert outcome.message == "Connection failed: connection refused"


@pytest.mark.unit
def test_test_connection_uses_short_timeout(
    config: PartnerConfig, http_client: OtaHttpClient, mock_session: Mock
) -> None:
    outcome = BookingComAdapter(http_client).test_connection(config)

    assert outcome.success is True
    assert outcome.message == "Booking.com connection successful"
    assert mock_session.request.call_args.kwargs["timeout"] <= 15
