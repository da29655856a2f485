import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse

import structlog

from ota_sync.db.engine import engine
from ota_sync.logging_config import setup_logging
from ota_sync.network.client import OtaHttpClient
from ota_sync.services.sync import SyncOrchestrator

setup_logging()
logger = structlog.get_logger(__name__)


def main() -> None:
    """
    Sync a single OTA configuration, or only probe it with --test.
    """
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("config_id", type=int, help="ota_configurations.id")
    parser.add_argument("--test", action="store_true", help="Probe the connection instead of syncing")
    args = parser.parse_args()

    client = OtaHttpClient()
    orchestrator = SyncOrchestrator(engine, client)
    try:
        if args.test:
            outcome = orchestrator.test_connection(args.config_id)
        else:
            outcome = orchestrator.sync_one(args.config_id)
        logger.info("done", config_id=args.config_id, success=outcome.success, message=outcome.message)
    except Exception:
        logger.exception("failed", config_id=args.config_id)
        raise
    finally:
        client.close()


if __name__ == "__main__":
    main()
