"""
Loaders for reference data and pre-aggregated procedures: alerts, region and
channel catalogs, perfect-store scores, market share by region.

Alerts and scores are read-only pass-through; nothing here mutates the store.
"""

import logging
from enum import Enum

import pandas as pd

from .. import config
from ..schemas import Alert, PerfectStoreScore, RegionShareRow
from .store import DataStore, Query, QueryResult
from .utils import validate_rows

logger = logging.getLogger(__name__)


class ShareStrategy(Enum):
    """How market share by region is obtained for one request."""

    PRE_AGGREGATED = "pre_aggregated"
    MANUAL = "manual"


def select_share_strategy(result: QueryResult) -> ShareStrategy:
    """Pick the procedure's rows when it succeeded, else manual aggregation."""
    if result.ok:
        return ShareStrategy.PRE_AGGREGATED
    logger.warning(
        "%s unavailable (%s); aggregating raw rows instead",
        config.MARKET_SHARE_PROCEDURE,
        result.error,
    )
    return ShareStrategy.MANUAL


def fetch_market_share_procedure(store: DataStore) -> QueryResult:
    return store.rpc(config.MARKET_SHARE_PROCEDURE)


def parse_region_shares(result: QueryResult) -> pd.DataFrame:
    """Rows of the market-share procedure as a DataFrame with columns
    region_name, own_brand_share_pct, total_market.

    Shares are rounded to one decimal, as in the raw-row aggregation.
    """
    columns = ["region_name", "own_brand_share_pct", "total_market"]
    records = validate_rows(result.data, RegionShareRow, source=config.MARKET_SHARE_PROCEDURE)
    if not records:
        return pd.DataFrame(columns=columns)
    shares = pd.DataFrame([r.model_dump() for r in records])[columns]
    shares["own_brand_share_pct"] = shares["own_brand_share_pct"].round(1)
    return shares


def load_perfect_store_scores(store: DataStore) -> list[PerfectStoreScore]:
    """Per-region perfect-store scores; empty when the procedure fails.

    The composite score has no raw-row equivalent, so there is no fallback.
    """
    result = store.rpc(config.PERFECT_STORE_PROCEDURE)
    if not result.ok:
        logger.warning("Perfect-store scores unavailable: %s", result.error)
        return []
    return validate_rows(result.data, PerfectStoreScore, source=config.PERFECT_STORE_PROCEDURE)


def load_alerts(
    store: DataStore,
    limit: int = config.DASHBOARD_ALERT_LIMIT,
    unread_only: bool = False,
) -> list[Alert]:
    """Most recent alerts first, at most ``limit``."""
    query = Query(
        table=config.ALERTS_TABLE,
        eq={"is_read": False} if unread_only else {},
        order_by="created_at",
        descending=True,
        limit=limit,
    )
    result = store.select(query)
    if not result.ok:
        logger.warning("Alerts query failed: %s", result.error)
        return []

    alerts = validate_rows(result.data, Alert, source=config.ALERTS_TABLE)
    logger.info("Loaded %d alerts", len(alerts))
    return alerts


def _load_names(store: DataStore, table: str) -> list[str]:
    result = store.select(Query(table=table, columns=("name",)))
    if not result.ok:
        logger.warning("Catalog '%s' unavailable: %s", table, result.error)
        return []
    return [str(row["name"]) for row in result.data if row.get("name")]


def load_region_names(store: DataStore) -> list[str]:
    return _load_names(store, config.REGIONS_TABLE)


def load_channel_names(store: DataStore) -> list[str]:
    return _load_names(store, config.CHANNELS_TABLE)
