import structlog

from ota_sync.db.engine import engine
from ota_sync.errors import NoActiveConfigurations
from ota_sync.logging_config import setup_logging
from ota_sync.network.client import OtaHttpClient
from ota_sync.services.sync import SyncOrchestrator

setup_logging()
logger = structlog.get_logger(__name__)


def main() -> int:
    """
    Push the current snapshot to every active partner once.

    Meant to be run from cron or a scheduler. Returns a non-zero exit code
    when any partner failed.
    """
    client = OtaHttpClient()
    try:
        summary = SyncOrchestrator(engine, client).sync_all()
    except NoActiveConfigurations:
        logger.warning("sync_all_skipped", reason="no_active_configurations")
        return 0
    finally:
        client.close()

    for result in summary.results:
        if not result.success:
            logger.warning(
                "partner_sync_failed",
                config_id=result.configuration_id,
                ota_name=result.ota_name,
                message=result.message,
            )
    return 1 if summary.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
