"""
Exception hierarchy for the OTA sync service.

Configuration lookups (ConfigNotFound, ConfigInactive, NoActiveConfigurations)
surface to the API caller before any network call is made. TransportError and
PartnerRejected are raised by the HTTP client and converted into failed
outcomes by the partner adapters. PersistenceError is reported on the log
channel and never replaces the outcome of a sync.
"""

from __future__ import annotations

from typing import Optional


class OtaSyncError(Exception):
    """Base class for all errors raised by the OTA sync service."""


class ConfigNotFound(OtaSyncError):
    def __init__(self, config_id: int):
        super().__init__(f"OTA configuration {config_id} not found")
        self.config_id = config_id


class ConfigInactive(OtaSyncError):
    def __init__(self, config_id: int):
        super().__init__(f"OTA configuration {config_id} is not active")
        self.config_id = config_id


class NoActiveConfigurations(OtaSyncError):
    def __init__(self) -> None:
        super().__init__("No active OTA configurations found")


class UnsupportedPartner(OtaSyncError):
    def __init__(self, partner_name: str):
        super().__init__(f"Unsupported OTA: {partner_name}")
        self.partner_name = partner_name


class TransportError(OtaSyncError):
    """Timeout, refused connection or DNS failure while calling a partner."""


class PartnerRejected(OtaSyncError):
    """The partner answered with a non-2xx status."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        super().__init__(f"Request failed with status code {status_code}")
        self.status_code = status_code
        self.body = body


class PersistenceError(OtaSyncError):
    """Writing to the configuration or log store failed."""
