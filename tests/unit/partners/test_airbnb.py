from datetime import date
from decimal import Decimal
from typing import Callable
from unittest.mock import Mock

import pytest

from ota_sync.network.client import OtaHttpClient
from ota_sync.partners.airbnb import AirbnbAdapter, build_ari_payload
from ota_sync.partners.types import PartnerConfig, PartnerCredentials, RoomAvailability


@pytest.fixture
def config() -> PartnerConfig:
    return PartnerConfig(
        id=3,
        ota_name="airbnb",
        endpoint_url="https://airbnb.example.test/v1/",
        hotel_id="L-55",
        credentials=PartnerCredentials(api_key="tok"),
    )


@pytest.mark.unit
def test_build_ari_payload_operations(config: PartnerConfig) -> None:
    rooms = [
        RoomAvailability(7, "Deluxe", Decimal("99.90"), 2, True),
        RoomAvailability(8, "Twin", Decimal("50"), 2, False),
    ]

    payload = build_ari_payload(config, rooms, today=date(2024, 5, 1))

    assert payload["listing_id"] == "L-55"
    assert payload["operations"][0] == {
        "room_id": "7",
        "availability": True,
        "price": {"amount": 99.9, "currency": "USD"},
        "date": "2024-05-01",
        "minimum_nights": 1,
    }
    assert payload["operations"][1]["availability"] is False


@pytest.mark.unit
def test_sync_sends_api_version_header(
    config: PartnerConfig, http_client: OtaHttpClient, mock_session: Mock
) -> None:
    outcome = AirbnbAdapter(http_client).sync(config, [])

    assert outcome.success is True
    assert outcome.message == "Airbnb ARI sync completed successfully"
    headers = mock_session.request.call_args.kwargs["headers"]
    assert headers["Authorization"] == "Bearer tok"
    assert headers["X-Airbnb-API-Version"] == "1.0"


@pytest.mark.unit
def test_probe_gets_test_path(
    config: PartnerConfig, http_client: OtaHttpClient, mock_session: Mock
) -> None:
    outcome = AirbnbAdapter(http_client).test_connection(config)

    assert outcome.success is True
    assert outcome.message == "Airbnb connection successful"
    args = mock_session.request.call_args.args
    assert args == ("GET", "https://airbnb.example.test/v1/test")


@pytest.mark.unit
def test_probe_rejected(
    config: PartnerConfig,
    http_client: OtaHttpClient,
    mock_session: Mock,
    make_response: Callable[..., Mock],
) -> None:
    mock_session.request.return_value = make_response(403)

    outcome = AirbnbAdapter(http_client).test_connection(config)

    assert outcome.success is False
    assert outcome.message == "Connection failed: Request failed with status code 403"
