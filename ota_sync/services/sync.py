"""Partner-level sync orchestrator for the OTA channel manager."""

from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime
from typing import Any, Optional

import structlog
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from ota_sync.config import MAX_CONCURRENT_SYNCS, SYNC_ALL_DEADLINE_SECONDS
from ota_sync.db.readers.configurations import (
    get_configuration,
    get_partner_credentials,
    list_active_configurations,
)
from ota_sync.db.writers.configurations import update_last_sync
from ota_sync.db.writers.sync_logs import append_sync_log
from ota_sync.errors import (
    ConfigInactive,
    ConfigNotFound,
    NoActiveConfigurations,
    PersistenceError,
    UnsupportedPartner,
)
from ota_sync.metrics import (
    active_configurations,
    connection_tests,
    records_synced,
    sync_duration,
    sync_total,
)
from ota_sync.network.client import OtaHttpClient
from ota_sync.partners.registry import get_adapter
from ota_sync.partners.types import (
    AggregateOutcome,
    ConnectionOutcome,
    PartnerConfig,
    PartnerCredentials,
    PartnerSyncResult,
    RoomAvailability,
    SyncOutcome,
)
from ota_sync.services.snapshot import build_snapshot
from ota_sync.utils.datetime import utc_now

logger = structlog.get_logger(__name__)

SYNC_TYPE = "availability"


def to_partner_config(conn: Connection, row: dict[str, Any]) -> PartnerConfig:
    """Combine a public configuration row with its credentials."""
    credentials = get_partner_credentials(conn, row["id"]) or PartnerCredentials()
    return PartnerConfig(
        id=row["id"],
        ota_name=row["ota_name"],
        endpoint_url=row["endpoint_url"],
        hotel_id=row["hotel_id"],
        is_active=bool(row["is_active"]),
        last_sync_at=row["last_sync_at"],
        sync_frequency=row["sync_frequency"],
        credentials=credentials,
    )


def load_partner_config(engine: Engine, config_id: int, require_active: bool = True) -> PartnerConfig:
    """
    Load a configuration with its credentials.

    Args:
        engine: SQLAlchemy Engine
        config_id: Configuration ID
        require_active: Reject deactivated configurations

    Raises:
        ConfigNotFound: If no configuration has this id
        ConfigInactive: If require_active and the configuration is deactivated
    """
    with engine.connect() as conn:
        row = get_configuration(conn, config_id)
        if row is None:
            raise ConfigNotFound(config_id)
        if require_active and not row["is_active"]:
            raise ConfigInactive(config_id)
        return to_partner_config(conn, row)


class SyncOrchestrator:
    """
    Runs partner syncs and records their outcome.

    Every dispatched attempt writes exactly one sync log entry and advances
    last_sync_at, whether the partner accepted the update or not. Failures to
    write either are logged and never replace the sync outcome.

    Attributes:
        engine: SQLAlchemy engine for configuration, snapshot and log access
        client: Shared HTTP client handed to the adapters
        max_workers: Upper bound on concurrent partner legs in sync_all

    Example:
        >>> orchestrator = SyncOrchestrator(engine, OtaHttpClient())
        >>> outcome = orchestrator.sync_one(3)
        >>> summary = orchestrator.sync_all(deadline=60)
    """

    def __init__(
        self,
        engine: Engine,
        client: OtaHttpClient,
        max_workers: int = MAX_CONCURRENT_SYNCS,
    ):
        self.engine = engine
        self.client = client
        self.max_workers = max(1, max_workers)

    # ------------------------------------------------------------------
    # Single partner
    # ------------------------------------------------------------------

    def sync_one(self, config_id: int) -> SyncOutcome:
        """
        Sync one active configuration with a freshly built snapshot.

        The outcome carries the ota_name of the configuration as loaded here.

        Raises:
            ConfigNotFound: If the configuration does not exist
            ConfigInactive: If the configuration is deactivated
        """
        config = load_partner_config(self.engine, config_id, require_active=True)

        try:
            rooms = build_snapshot(self.engine)
        except SQLAlchemyError as e:
            logger.exception("snapshot_failed", config_id=config.id, error=str(e))
            return self._fail_attempt(config, f"Failed to build availability snapshot: {e}")

        return self.run_sync(config, rooms)

    def run_sync(self, config: PartnerConfig, rooms: list[RoomAvailability]) -> SyncOutcome:
        """
        Dispatch one partner leg and record it.

        Never raises: an unsupported partner or an unexpected adapter error
        becomes a failed outcome.

        Args:
            config: Partner configuration with credentials
            rooms: Snapshot shared by all legs of a bulk sync

        Returns:
            SyncOutcome: The adapter's outcome
        """
        log = logger.bind(config_id=config.id, ota_name=config.ota_name)
        started_at = utc_now()

        try:
            adapter = get_adapter(config.ota_name, self.client)
        except UnsupportedPartner as e:
            log.warning("partner_unsupported")
            return self._fail_attempt(config, str(e), started_at=started_at)

        partner = config.kind.value
        log.info("partner_sync_started", rooms=len(rooms))

        with sync_duration.labels(partner=partner).time():
            try:
                outcome = adapter.sync(config, rooms)
            except Exception as e:
                log.exception("partner_sync_crashed", error=str(e))
                outcome = SyncOutcome(
                    success=False, message=f"{adapter.display_name} sync failed: {e}"
                )

        outcome.ota_name = config.ota_name
        status = "success" if outcome.success else "failed"
        sync_total.labels(partner=partner, status=status).inc()
        if outcome.success:
            records_synced.labels(partner=partner).inc(len(rooms))

        self._write_log(config, status, outcome.message, len(rooms), started_at)
        self._touch_last_sync(config)

        log.info("partner_sync_completed", status=status, message=outcome.message)
        return outcome

    # ------------------------------------------------------------------
    # All partners
    # ------------------------------------------------------------------

    def sync_all(self, deadline: Optional[float] = SYNC_ALL_DEADLINE_SECONDS) -> AggregateOutcome:
        """
        Sync every active configuration concurrently against one snapshot.

        All legs run to completion; one partner's failure never cancels the
        others. When the deadline expires, legs still running are reported as
        failed and keep running in the background, where they write their own
        log entry.

        Args:
            deadline: Seconds to wait for all legs; None waits indefinitely
                (each leg is bounded by its own partner timeout)

        Returns:
            AggregateOutcome: Counts and per-partner results in configuration order

        Raises:
            NoActiveConfigurations: If there is nothing to sync
        """
        with self.engine.connect() as conn:
            configs = [to_partner_config(conn, row) for row in list_active_configurations(conn)]

        if not configs:
            raise NoActiveConfigurations()

        active_configurations.set(len(configs))
        logger.info("sync_all_started", configurations=len(configs), deadline=deadline)

        try:
            rooms = build_snapshot(self.engine)
        except SQLAlchemyError as e:
            logger.exception("snapshot_failed", error=str(e))
            message = f"Failed to build availability snapshot: {e}"
            outcomes = [self._fail_attempt(config, message) for config in configs]
            return self._aggregate(configs, outcomes)

        executor = ThreadPoolExecutor(
            max_workers=min(len(configs), self.max_workers),
            thread_name_prefix="ota-sync",
        )
        futures: list[Future[SyncOutcome]] = [
            executor.submit(self.run_sync, config, rooms) for config in configs
        ]
        _, pending = wait(futures, timeout=deadline)
        # Legs past the deadline finish on their own; do not block the caller on them
        executor.shutdown(wait=False)

        outcomes = []
        for config, future in zip(configs, futures):
            if future in pending:
                outcomes.append(self._timed_out(config, future, deadline))
                continue
            try:
                outcomes.append(future.result())
            except Exception as e:
                logger.exception("partner_leg_failed", config_id=config.id, error=str(e))
                outcomes.append(
                    SyncOutcome(success=False, message=str(e), ota_name=config.ota_name)
                )

        summary = self._aggregate(configs, outcomes)
        logger.info(
            "sync_all_completed",
            total=summary.total,
            succeeded=summary.succeeded,
            failed=summary.failed,
        )
        return summary

    # ------------------------------------------------------------------
    # Connection probe
    # ------------------------------------------------------------------

    def test_connection(self, config_id: int) -> ConnectionOutcome:
        """
        Probe a partner with the stored credentials.

        Works for deactivated configurations too. Read-only: no log entry is
        written and last_sync_at is left untouched.

        Raises:
            ConfigNotFound: If the configuration does not exist
        """
        config = load_partner_config(self.engine, config_id, require_active=False)

        try:
            adapter = get_adapter(config.ota_name, self.client)
        except UnsupportedPartner as e:
            return ConnectionOutcome(success=False, message=str(e), ota_name=config.ota_name)

        outcome = adapter.test_connection(config)
        outcome.ota_name = config.ota_name
        connection_tests.labels(
            partner=config.kind.value, status="success" if outcome.success else "failed"
        ).inc()
        logger.info(
            "connection_tested",
            config_id=config.id,
            ota_name=config.ota_name,
            success=outcome.success,
        )
        return outcome

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fail_attempt(
        self, config: PartnerConfig, message: str, started_at: Optional[datetime] = None
    ) -> SyncOutcome:
        """Record an attempt that failed before anything was sent to the partner."""
        sync_total.labels(partner=config.kind.value, status="failed").inc()
        self._write_log(config, "failed", message, 0, started_at or utc_now())
        return SyncOutcome(success=False, message=message, ota_name=config.ota_name)

    def _timed_out(
        self, config: PartnerConfig, future: "Future[SyncOutcome]", deadline: Optional[float]
    ) -> SyncOutcome:
        message = f"{config.ota_name} sync timed out after {deadline:g}s"
        if future.cancel():
            # Never started, so no leg will write its log entry
            return self._fail_attempt(config, message)
        logger.warning("partner_sync_deadline_exceeded", config_id=config.id, deadline=deadline)
        return SyncOutcome(success=False, message=message, ota_name=config.ota_name)

    def _write_log(
        self,
        config: PartnerConfig,
        status: str,
        message: str,
        records_processed: int,
        started_at: datetime,
    ) -> None:
        try:
            append_sync_log(
                self.engine,
                configuration_id=config.id,
                sync_type=SYNC_TYPE,
                status=status,
                message=message,
                records_processed=records_processed,
                sync_started_at=started_at,
                sync_completed_at=utc_now(),
            )
        except PersistenceError as e:
            logger.exception("sync_log_write_failed", config_id=config.id, error=str(e))

    def _touch_last_sync(self, config: PartnerConfig) -> None:
        try:
            with self.engine.begin() as conn:
                update_last_sync(conn, config.id)
        except SQLAlchemyError as e:
            logger.exception("last_sync_update_failed", config_id=config.id, error=str(e))

    @staticmethod
    def _aggregate(configs: list[PartnerConfig], outcomes: list[SyncOutcome]) -> AggregateOutcome:
        results = [
            PartnerSyncResult(
                configuration_id=config.id,
                ota_name=config.ota_name,
                success=outcome.success,
                message=outcome.message,
            )
            for config, outcome in zip(configs, outcomes)
        ]
        succeeded = sum(1 for r in results if r.success)
        return AggregateOutcome(
            total=len(results),
            succeeded=succeeded,
            failed=len(results) - succeeded,
            results=results,
        )
