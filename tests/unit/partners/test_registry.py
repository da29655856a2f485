import pytest

from ota_sync.errors import UnsupportedPartner
from ota_sync.network.client import OtaHttpClient
from ota_sync.partners.agoda import AgodaAdapter
from ota_sync.partners.booking_com import BookingComAdapter
from ota_sync.partners.registry import get_adapter, is_supported
from ota_sync.partners.types import PartnerCredentials, PartnerKind


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, kind",
    [
        ("booking_com", PartnerKind.BOOKING_COM),
        (" Booking.com ", PartnerKind.BOOKING_COM),
        ("AGODA", PartnerKind.AGODA),
        ("airbnb", PartnerKind.AIRBNB),
        ("expedia", PartnerKind.OTHER),
    ],
)
def test_partner_kind_from_name(name: str, kind: PartnerKind) -> None:
    assert PartnerKind.from_name(name) is kind


@pytest.mark.unit
def test_get_adapter_returns_partner_implementation(http_client: OtaHttpClient) -> None:
    assert isinstance(get_adapter("Booking.com", http_client), BookingComAdapter)
    assert isinstance(get_adapter("agoda", http_client), AgodaAdapter)
    assert is_supported("airbnb") is True


@pytest.mark.unit
def test_get_adapter_unsupported_partner(http_client: OtaHttpClient) -> None:
    with pytest.raises(UnsupportedPartner, match="Unsupported OTA: expedia"):
        get_adapter("expedia", http_client)
    assert is_supported("expedia") is False


@pytest.mark.unit
def test_credentials_repr_hides_secrets() -> None:
    credentials = PartnerCredentials(api_key="secret-key", api_password="hunter2")

    text = repr(credentials)

    assert "secret-key" not in text
    assert "hunter2" not in text
    assert "api_username=None" in text
