from __future__ import annotations

import base64
from abc import ABC, abstractmethod
from typing import Optional

import requests
import structlog

from ota_sync.config import SYNC_TIMEOUT_SECONDS, TEST_CONNECTION_TIMEOUT_SECONDS
from ota_sync.errors import PartnerRejected, TransportError
from ota_sync.network.client import OtaHttpClient, response_body
from ota_sync.partners.types import (
    ConnectionOutcome,
    PartnerConfig,
    PartnerKind,
    RoomAvailability,
    SyncOutcome,
)

logger = structlog.get_logger(__name__)


class PartnerAdapter(ABC):
    """
    Base interface for OTA partners (Booking.com, Agoda, Airbnb).

    Each implementation encapsulates the partner's wire format and
    authentication. sync() and test_connection() never raise for partner-side
    problems: transport errors and non-2xx responses become failed outcomes.
    """

    kind: PartnerKind = PartnerKind.OTHER
    display_name: str = "base"

    def __init__(
        self,
        client: OtaHttpClient,
        sync_timeout: float = SYNC_TIMEOUT_SECONDS,
        test_timeout: float = TEST_CONNECTION_TIMEOUT_SECONDS,
    ):
        self.client = client
        self.sync_timeout = sync_timeout
        self.test_timeout = test_timeout

    @abstractmethod
    def send_ari(self, config: PartnerConfig, rooms: list[RoomAvailability]) -> requests.Response:
        """Encode the rooms in the partner's format and post them to config.endpoint_url."""

        raise NotImplementedError

    @abstractmethod
    def probe(self, config: PartnerConfig) -> requests.Response:
        """Issue the partner's lightweight connectivity/credential check."""

        raise NotImplementedError

    def sync(self, config: PartnerConfig, rooms: list[RoomAvailability]) -> SyncOutcome:
        """
        Push the rooms' ARI data to the partner.

        Args:
            config: Partner configuration with credentials
            rooms: Availability snapshot

        Returns:
            SyncOutcome: success flag, human-readable message and the partner's response body
        """
        try:
            res = self.send_ari(config, rooms)
        except (TransportError, PartnerRejected) as e:
            logger.warning(
                "partner_sync_failed",
                partner=self.kind.value,
                config_id=config.id,
                error=str(e),
            )
            return SyncOutcome(success=False, message=f"{self.display_name} sync failed: {e}")

        return SyncOutcome(
            success=True,
            message=f"{self.display_name} ARI sync completed successfully",
            raw_response=response_body(res),
        )

    def test_connection(self, config: PartnerConfig) -> ConnectionOutcome:
        try:
            self.probe(config)
        except (TransportError, PartnerRejected) as e:
            logger.warning(
                "partner_connection_failed",
                partner=self.kind.value,
                config_id=config.id,
                error=str(e),
            )
            return ConnectionOutcome(success=False, message=f"Connection failed: {e}")

        return ConnectionOutcome(success=True, message=f"{self.display_name} connection successful")


def bearer_headers(api_key: Optional[str], content_type: Optional[str] = None) -> dict[str, str]:
    headers = {"Authorization": f"Bearer {api_key or ''}"}
    if content_type:
        headers["Content-Type"] = content_type
    return headers


def basic_auth_header(username: Optional[str], password: Optional[str]) -> str:
    token = base64.b64encode(f"{username or ''}:{password or ''}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"
