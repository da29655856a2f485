from datetime import timedelta
from typing import Any, Optional

from sqlalchemy import and_, case, func, select
from sqlalchemy.engine import Connection

from ota_sync.models.configurations import OtaConfiguration
from ota_sync.models.sync_logs import OtaSyncLog
from ota_sync.utils.datetime import utc_now

STATS_PERIODS: dict[str, Optional[timedelta]] = {
    "week": timedelta(weeks=1),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
    "all": None,
}


def list_sync_logs(
    conn: Connection,
    config_id: Optional[int] = None,
    limit: int = 50,
    page: int = 1,
) -> list[dict[str, Any]]:
    """
    List sync log entries newest first, joined with the partner name.

    Entries whose configuration was hard-deleted are still returned, with
    ota_name set to None.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        config_id (Optional[int]): Only entries for this configuration.
        limit (int): Page size.
        page (int): 1-based page number.

    Returns:
        list[dict[str, Any]]: Log rows including ota_name.
    """
    stmt = (
        select(
            OtaSyncLog.id,
            OtaSyncLog.configuration_id,
            OtaSyncLog.sync_type,
            OtaSyncLog.status,
            OtaSyncLog.message,
            OtaSyncLog.records_processed,
            OtaSyncLog.sync_started_at,
            OtaSyncLog.sync_completed_at,
            OtaConfiguration.ota_name,
        )
        .select_from(OtaSyncLog)
        .outerjoin(OtaConfiguration, OtaSyncLog.configuration_id == OtaConfiguration.id)
    )

    if config_id is not None:
        stmt = stmt.where(OtaSyncLog.configuration_id == config_id)

    offset = (max(page, 1) - 1) * limit
    stmt = (
        stmt.order_by(OtaSyncLog.sync_started_at.desc(), OtaSyncLog.id.desc())
        .limit(limit)
        .offset(offset)
    )

    return [dict(row) for row in conn.execute(stmt).mappings()]


def count_sync_logs(conn: Connection, config_id: Optional[int] = None) -> int:
    stmt = select(func.count(OtaSyncLog.id))
    if config_id is not None:
        stmt = stmt.where(OtaSyncLog.configuration_id == config_id)
    return int(conn.execute(stmt).scalar_one())


def get_sync_stats(conn: Connection, period: str = "week") -> list[dict[str, Any]]:
    """
    Per-partner sync counts for active configurations over a time window.

    Partners without any attempt in the window are still listed with zero
    counts. Unknown periods are treated as "all".

    Args:
        conn (Connection): SQLAlchemy DB connection.
        period (str): week, month, year or all.

    Returns:
        list[dict[str, Any]]: One row per active configuration, ordered by ota_name.
    """
    window = STATS_PERIODS.get(period)

    join_condition = OtaSyncLog.configuration_id == OtaConfiguration.id
    if window is not None:
        join_condition = and_(join_condition, OtaSyncLog.sync_started_at >= utc_now() - window)

    stmt = (
        select(
            OtaConfiguration.id.label("configuration_id"),
            OtaConfiguration.ota_name,
            func.count(OtaSyncLog.id).label("total_syncs"),
            func.coalesce(
                func.sum(case((OtaSyncLog.status == "success", 1), else_=0)), 0
            ).label("successful_syncs"),
            func.coalesce(
                func.sum(case((OtaSyncLog.status == "failed", 1), else_=0)), 0
            ).label("failed_syncs"),
            func.max(OtaSyncLog.sync_started_at).label("last_sync_at"),
            func.coalesce(func.sum(OtaSyncLog.records_processed), 0).label(
                "total_records_processed"
            ),
        )
        .select_from(OtaConfiguration)
        .outerjoin(OtaSyncLog, join_condition)
        .where(OtaConfiguration.is_active.is_(True))
        .group_by(OtaConfiguration.id, OtaConfiguration.ota_name)
        .order_by(OtaConfiguration.ota_name)
    )

    return [dict(row) for row in conn.execute(stmt).mappings()]
