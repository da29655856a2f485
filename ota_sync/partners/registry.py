"""Mapping from partner kind to adapter implementation."""

from ota_sync.errors import UnsupportedPartner
from ota_sync.network.client import OtaHttpClient
from ota_sync.partners.agoda import AgodaAdapter
from ota_sync.partners.airbnb import AirbnbAdapter
from ota_sync.partners.base import PartnerAdapter
from ota_sync.partners.booking_com import BookingComAdapter
from ota_sync.partners.types import PartnerKind

ADAPTERS: dict[PartnerKind, type[PartnerAdapter]] = {
    PartnerKind.BOOKING_COM: BookingComAdapter,
    PartnerKind.AGODA: AgodaAdapter,
    PartnerKind.AIRBNB: AirbnbAdapter,
}


def is_supported(partner_name: str) -> bool:
    return PartnerKind.from_name(partner_name) in ADAPTERS


def get_adapter(partner_name: str, client: OtaHttpClient) -> PartnerAdapter:
    """
    Return the adapter for a stored ota_name.

    Args:
        partner_name: ota_name as stored on the configuration
        client: Shared HTTP client

    Returns:
        PartnerAdapter: Adapter bound to the client

    Raises:
        UnsupportedPartner: If no adapter exists for the name
    """
    adapter_cls = ADAPTERS.get(PartnerKind.from_name(partner_name))
    if adapter_cls is None:
        raise UnsupportedPartner(partner_name)
    return adapter_cls(client)
